"""Simple entrypoint to score an outfit or rank candidates from a wardrobe file."""

import argparse
import json
from pathlib import Path

from evaluation.harness import run_smoke_checks
from outfit_app.config import EngineConfig
from outfit_app.logging_config import configure_logging
from tools.outfit_tools import OutfitTools
from tools.wardrobe_store import InMemoryWardrobeStore


def main() -> None:
    parser = argparse.ArgumentParser(description="Score outfits against a wardrobe")
    parser.add_argument("--wardrobe", help="Path to a JSON list of wardrobe item rows.")
    parser.add_argument("--anchor", help="Rank candidates against this item id.")
    parser.add_argument("--items", nargs="*", default=[], help="Item ids to score as one outfit.")
    parser.add_argument("--tucked", action="store_true", help="Score with the shirt tucked.")
    args = parser.parse_args()

    config = EngineConfig.from_env()
    configure_logging(config.log_level)

    if not args.wardrobe:
        print("\n".join(run_smoke_checks()))
        return

    rows = json.loads(Path(args.wardrobe).read_text())
    tools = OutfitTools(InMemoryWardrobeStore.from_rows(rows), config)
    if args.anchor:
        print(json.dumps(tools.filter_by_anchor(args.anchor, target_season=config.target_season), indent=2))
    if args.items:
        tuck_style = "Tucked" if args.tucked else config.default_tuck_style
        print(json.dumps(tools.score_outfit(args.items, tuck_style=tuck_style), indent=2))


if __name__ == "__main__":
    main()
