"""
Batch Runner - Analyze Many Places
==================================

Reads place ids from an Excel/CSV file and runs the factor analysis for
each one, pausing between places to stay under the LLM rate limit.
Results are stored in the same database the API serves.

    python run_batch.py places.xlsx --user-id owner-1
"""

import argparse
import logging

from review_insight.application import AnalysisService
from review_insight.infrastructure.config import get_settings
from review_insight.infrastructure.importer import parse_place_list

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


def run_batch(file_path: str, user_id: str, sheet_name: str = None) -> dict:
    """Analyze every place listed in ``file_path``."""

    print("\n" + "=" * 60)
    print("   Review Insight - Batch Runner")
    print("=" * 60 + "\n")

    settings = get_settings()
    for issue in settings.validate():
        print(f"   {issue}")

    places = parse_place_list(file_path, sheet_name)
    if not places:
        print("No place ids found. Nothing to do.")
        return {"succeeded": {}, "failed": {}}

    print(f"Found {len(places)} places\n")

    service = AnalysisService.from_settings()
    outcome = service.batch_analyze([p["place_id"] for p in places], user_id)

    for place in places:
        label = place["name"] or place["place_id"]
        summary = outcome["succeeded"].get(place["place_id"])
        if summary:
            result = summary["result"]
            print(f"   OK    {label}: overall {result['overall_score']} ({result['sentiment']})")
        else:
            print(f"   FAIL  {label}: {outcome['failed'].get(place['place_id'], 'unknown error')}")

    # Summary
    print("\n" + "=" * 60)
    print("Batch Complete!")
    print(f"   Succeeded: {len(outcome['succeeded'])} | Failed: {len(outcome['failed'])}")
    print("=" * 60 + "\n")

    return outcome


def main():
    parser = argparse.ArgumentParser(description="Analyze reviews for a list of places")
    parser.add_argument("file", help="Excel or CSV file with a place_id column")
    parser.add_argument("--user-id", required=True, help="Owner recorded on newly created stores")
    parser.add_argument("--sheet", default=None, help="Sheet name for Excel files")
    args = parser.parse_args()

    try:
        run_batch(args.file, args.user_id, args.sheet)
    except KeyboardInterrupt:
        print("\n\nInterrupted! Finished places are saved.")
    except (FileNotFoundError, ValueError) as e:
        logger.error(f"Cannot read place list: {e}")


if __name__ == "__main__":
    main()
