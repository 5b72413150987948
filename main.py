#!/usr/bin/env python3
"""Batch-scan a folder of pantry photos and write the detected ingredients."""

from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path
from typing import Dict, List, Optional

from pantry_recognition import (
    DetectedIngredient,
    IngredientDetectionAggregator,
    merge_results,
)
from pantry_recognition import config

IMAGE_EXTENSIONS = {".jpg", ".jpeg", ".png", ".bmp", ".tiff"}


def analyze_images_in_folder(
    folder_path: str,
    aggregator: IngredientDetectionAggregator,
) -> Dict[str, dict]:
    """Scan every image in the folder.

    Returns:
        mapping of file name to ``{"ingredients": [...], "error": str | None}``
    """
    folder = Path(folder_path)
    if not folder.exists():
        print(f"❌ Folder not found: {folder_path}")
        return {}

    image_files = sorted(
        f for f in folder.iterdir() if f.is_file() and f.suffix.lower() in IMAGE_EXTENSIONS
    )
    if not image_files:
        print(f"⚠️  No images found in: {folder_path}")
        return {}

    print(f"📁 Found {len(image_files)} images")
    print("=" * 80)

    all_results: Dict[str, dict] = {}
    for idx, image_file in enumerate(image_files, 1):
        print(f"\n[{idx}/{len(image_files)}] Scanning: {image_file.name}")

        ingredients = aggregator.process_image(str(image_file))
        error = aggregator.last_error

        if ingredients:
            print(f"  ✅ {len(ingredients)} ingredients:")
            for ingredient in ingredients:
                print(
                    f"     - {ingredient.name}: {ingredient.percent}% "
                    f"({ingredient.source.description}, {ingredient.confidence_level.value})"
                )
        else:
            print("  ℹ️  No ingredients detected")
        if error:
            print(f"  ⚠️  {error}")

        all_results[image_file.name] = {
            "ingredients": ingredients,
            "error": error,
        }

    print("\n" + "=" * 80)
    return all_results


def combine_results(results: Dict[str, dict]) -> List[DetectedIngredient]:
    """Merge every scan into one pantry list, keeping the best detection per name."""
    combined: List[DetectedIngredient] = []
    for data in results.values():
        combined = merge_results(combined, data["ingredients"])
    return combined


def build_report(results: Dict[str, dict], combine: bool = False) -> dict:
    images = [
        {
            "image": name,
            "ingredients": [ingredient.to_dict() for ingredient in data["ingredients"]],
            "error": data["error"],
        }
        for name, data in results.items()
    ]
    report: dict = {
        "images": images,
        "summary": {
            "total": len(results),
            "with_ingredients": sum(1 for data in results.values() if data["ingredients"]),
            "with_errors": sum(1 for data in results.values() if data["error"]),
        },
    }
    if combine:
        report["pantry"] = [ingredient.to_dict() for ingredient in combine_results(results)]
    return report


def print_summary(results: Dict[str, dict]) -> None:
    print("\n" + "=" * 80)
    print("📊 Summary")
    print("=" * 80)

    counts: Dict[str, int] = {}
    for data in results.values():
        for ingredient in data["ingredients"]:
            counts[ingredient.name] = counts.get(ingredient.name, 0) + 1

    print(f"\nImages scanned: {len(results)}")
    print(f"  - with ingredients: {sum(1 for d in results.values() if d['ingredients'])}")
    print(f"  - with errors: {sum(1 for d in results.values() if d['error'])}")

    if counts:
        print("\nIngredients seen:")
        for name, count in sorted(counts.items(), key=lambda x: x[1], reverse=True):
            print(f"  - {name}: {count}")


def save_results_to_json(report: dict, output_file: str) -> None:
    with open(output_file, "w", encoding="utf-8") as f:
        json.dump(report, f, ensure_ascii=False, indent=2)
    print(f"💾 Results saved to: {output_file}")


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Detect ingredients in pantry photos.")
    parser.add_argument("folder", nargs="?", default=str(Path(__file__).parent / "test-images"))
    parser.add_argument("--output", default="analysis_results.json")
    parser.add_argument(
        "--combine",
        action="store_true",
        help="also merge all scans into one de-duplicated pantry list",
    )
    parser.add_argument("--log-level", default=config.LOG_LEVEL)
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> None:
    args = parse_args(argv)
    logging.basicConfig(
        level=args.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    print(f"📂 Image folder: {args.folder}")
    print(
        f"📊 Thresholds: object > {config.OBJECT_CONFIDENCE_THRESHOLD:.0%}, "
        f"text > {config.TEXT_CONFIDENCE_THRESHOLD:.0%}\n"
    )

    with IngredientDetectionAggregator() as aggregator:
        results = analyze_images_in_folder(args.folder, aggregator)

    if results:
        print_summary(results)
        save_results_to_json(build_report(results, combine=args.combine), args.output)


if __name__ == "__main__":
    main()
