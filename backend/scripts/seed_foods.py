#!/usr/bin/env python3
"""
Seed the nutrition catalog (foods table) from a CSV of per-100g nutrition.

Columns: name, calories, protein, carbs, fat, is_liquid (optional), preparation (optional).
Rows whose normalized name already exists are skipped.
"""
import sys
import logging
import argparse
from pathlib import Path

# Add backend to path
backend_path = Path(__file__).parent.parent
sys.path.insert(0, str(backend_path))

import pandas as pd

from lifedesk.core.constants import FoodConstants
from lifedesk.db.crud_foods import NutritionCatalog
from lifedesk.db.session import SessionLocal, init_db
from lifedesk.services.voice.nutrition import mentions_uncooked

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

DEFAULT_CSV = backend_path / "data" / "popular_foods.csv"
REQUIRED_COLUMNS = ["name", "calories", "protein", "carbs", "fat"]


def load_foods(csv_path: Path) -> pd.DataFrame:
    """Read and clean the catalog CSV."""
    df = pd.read_csv(csv_path)
    missing = [col for col in REQUIRED_COLUMNS if col not in df.columns]
    if missing:
        raise ValueError(f"{csv_path} is missing columns: {', '.join(missing)}")

    df = df.dropna(subset=["name"])
    df["name"] = df["name"].astype(str).str.strip()
    df = df[df["name"] != ""]
    for col in ["calories", "protein", "carbs", "fat"]:
        df[col] = pd.to_numeric(df[col], errors="coerce").fillna(0).clip(lower=0)

    if "is_liquid" not in df.columns:
        df["is_liquid"] = False
    df["is_liquid"] = df["is_liquid"].fillna(False).astype(str).str.lower().isin(["true", "1", "yes"])

    if "preparation" not in df.columns:
        df["preparation"] = None
    df["preparation"] = [
        prep if isinstance(prep, str) and prep.strip() else (
            FoodConstants.PREPARATION_UNCOOKED if mentions_uncooked(name) else FoodConstants.PREPARATION_COOKED
        )
        for name, prep in zip(df["name"], df["preparation"])
    ]
    return df


def seed_foods(csv_path: Path) -> int:
    """Insert every CSV row missing from the catalog. Returns the number of new rows."""
    df = load_foods(csv_path)
    logger.info(f"Loaded {len(df)} foods from {csv_path}")

    init_db()
    db = SessionLocal()
    inserted = 0
    try:
        catalog = NutritionCatalog(db)
        for row in df.itertuples(index=False):
            if catalog.find_by_normalized_name(row.name) is not None:
                continue
            catalog.insert_if_absent(row.name, {
                "calories": row.calories,
                "protein": row.protein,
                "carbs": row.carbs,
                "fat": row.fat,
                "is_liquid": bool(row.is_liquid),
                "preparation": row.preparation,
            })
            inserted += 1
    finally:
        db.close()

    logger.info(f"Inserted {inserted} new foods ({len(df) - inserted} already present)")
    return inserted


def main():
    parser = argparse.ArgumentParser(description="Seed the nutrition catalog from a CSV file")
    parser.add_argument("--csv", type=Path, default=DEFAULT_CSV, help="Path to the foods CSV")
    args = parser.parse_args()

    if not args.csv.exists():
        logger.error(f"CSV not found: {args.csv}")
        sys.exit(1)
    seed_foods(args.csv)


if __name__ == "__main__":
    main()
