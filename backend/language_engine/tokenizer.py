"""Source-code tokenizer shared by model training and inference."""

import re

NUMBER_TOKEN = "<num>"

# Multi-character operators first so "::" is not split into two ":" tokens
_TOKEN_PATTERN = re.compile(
    r"#!|#include|::|->|=>|:=|<-|==|!=|<=|>=|&&|\|\||\+\+|--|<<|>>|\.\.|\?\?"
    r"|[A-Za-z_$@][A-Za-z0-9_]*"
    r"|[0-9][0-9_.xXa-fA-F]*"
    r"|[^\sA-Za-z0-9_]"
)


def tokenize(text: str) -> list[str]:
    """Split code into identifier, number and punctuation tokens."""
    tokens = []
    for match in _TOKEN_PATTERN.finditer(text):
        token = match.group(0)
        if token[0].isdigit():
            token = NUMBER_TOKEN
        tokens.append(token)
    return tokens
