#!/usr/bin/env python3
"""
Manual script for visual verification of themes and language detection.

Classifies a handful of sample snippets with the bundled model, then
renders each one with a different theme for side-by-side inspection.

Usage:
    python backend/scripts/render_samples.py [--font "DejaVu Sans Mono"]

Visual Verification Checklist:
    [ ] Every image has a title bar with three window controls
    [ ] Corners are rounded and the padding is transparent
    [ ] Highlighted lines stand out from the rest
    [ ] Detected languages match the snippet labels
"""

import argparse
import asyncio
import sys
import time
from pathlib import Path

from app.config import settings
from app.services.render_orchestrator import RenderOrchestrator
from language_engine import load_classifier
from render_engine import PygmentsRenderEngine, RenderEngineError

SAMPLES = {
    "rust": ('monokai', 'fn main() {\n    let mut v: Vec<i32> = Vec::new();\n    v.push(1);\n    println!("{:?}", v);\n}'),
    "python": ('dracula', 'def greet(name):\n    if name is None:\n        raise ValueError("name")\n    return f"Hello {name}"'),
    "sql": ('solarized-light', "SELECT id, name\nFROM users\nWHERE active = 1\nORDER BY name;"),
    "go": ('github-dark', 'package main\n\nimport "fmt"\n\nfunc main() {\n    fmt.Println("hi")\n}'),
}


def render_samples(font: str, output_dir: Path) -> list[dict]:
    """Classify and render every sample, returning one result dict each."""
    classifier = load_classifier(settings.MODEL_DIR)
    engine = PygmentsRenderEngine(default_font_size=settings.DEFAULT_FONT_SIZE)
    orchestrator = RenderOrchestrator(classifier, engine, settings.CONFIDENCE_FLOOR)

    results = []
    for label, (theme, code) in SAMPLES.items():
        top = classifier.classify(code).top
        guess = f"{top.label} ({top.confidence:.2f})" if top else "none"
        print(f"🔎 {label:<8} classifier guess: {guess}")

        output_path = output_dir / f"sample_{label}.png"
        start_time = time.time()
        raw = {"code": code, "theme": theme, "font": font, "highlight_lines": "2"}
        try:
            job = asyncio.run(orchestrator.prepare_job(raw))
            output_path.write_bytes(engine.render(job))
        except RenderEngineError as e:
            print(f"   ❌ Render failed: {e}")
            results.append({"label": label, "success": False, "error": str(e)})
            continue

        duration = time.time() - start_time
        print(f"   ✅ {theme} rendered in {duration:.2f}s → {output_path}")
        results.append({"label": label, "success": True, "output_path": output_path})
    return results


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[1])
    parser.add_argument("--font", default="DejaVu Sans Mono")
    parser.add_argument("--output-dir", type=Path, default=Path("/tmp/inkify_samples"))
    args = parser.parse_args()

    args.output_dir.mkdir(parents=True, exist_ok=True)
    print("=" * 60)
    print("INKIFY SAMPLE RENDERS - VISUAL VERIFICATION")
    print("=" * 60)

    results = render_samples(args.font, args.output_dir)

    failed = [r for r in results if not r["success"]]
    if failed:
        print(f"\n⚠️  {len(failed)} sample(s) failed to render")
        sys.exit(1)
    print("\n✅ All samples rendered successfully!")


if __name__ == "__main__":
    main()
