# profile input: column mapping and table loading
import logging
import re

import pandas as pd
from fuzzywuzzy import process

from core.models import DefectProfile
from core.units import UnitSystem, length_from_metric

logger = logging.getLogger(__name__)


# COLUMN_MAPPING SECTION
# ------------------------------------------------------------------------
# Canonical column names of a river-bottom profile table
STANDARD_COLUMNS = ["distance", "depth"]

# ------------------------------------------------------------------------
# Common alternative names for each standard column
COLUMN_VARIANTS = {
    "distance": [
        "x", "position", "axial position", "axial distance", "axial_dist",
        "station", "chainage", "log dist", "distance [mm]", "distance [in]", "x [mm]", "x [in]",
    ],
    "depth": [
        "d", "metal loss", "wall loss", "river bottom depth", "max depth", "pit depth",
        "depth [mm]", "depth [in]", "d [mm]", "d [in]", "depth_mm",
    ],
}

# Columns that must be present (after mapping) to build a profile
REQUIRED_COLUMNS = ["distance", "depth"]

FUZZY_SCORE_THRESHOLD = 70


def clean_column_name(col_name):
    """Clean column name for better matching"""
    cleaned = str(col_name).lower().strip()
    # Replace common separators with spaces
    cleaned = re.sub(r'[_\-\.]', ' ', cleaned)
    cleaned = re.sub(r'\s+', ' ', cleaned)
    return cleaned


def suggest_column_mapping(df):
    """
    Suggest a mapping from each STANDARD_COLUMN to the best candidate
    in df.columns, using:
      1. Exact match
      2. COLUMN_VARIANTS (exact, case-insensitive or cleaned)
      3. Fuzzy matching on cleaned names (score > 70)

    Returns:
        mapping: dict where keys are STANDARD_COLUMNS and values are
                 the matched column from df.columns, or None if no match.
    """
    file_columns = list(df.columns)
    mapping = {}
    used_columns = set()  # a file column maps to one standard column only

    for std_col in STANDARD_COLUMNS:
        # 1. Exact match
        if std_col in file_columns and std_col not in used_columns:
            mapping[std_col] = std_col
            used_columns.add(std_col)
            continue

        # 2. Variants
        for variant in COLUMN_VARIANTS[std_col]:
            match = next(
                (col for col in file_columns
                 if col not in used_columns and (
                     col == variant or
                     str(col).lower() == variant.lower() or
                     clean_column_name(col) == clean_column_name(variant))),
                None,
            )
            if match is not None:
                mapping[std_col] = match
                used_columns.add(match)
                break
        if std_col in mapping:
            continue

        # 3. Fuzzy matching fallback
        available_columns = [col for col in file_columns if col not in used_columns]
        mapping[std_col] = None
        if available_columns:
            cleaned_available = {clean_column_name(col): col for col in available_columns}
            match, score = process.extractOne(std_col, list(cleaned_available))
            if score and score > FUZZY_SCORE_THRESHOLD:
                original = cleaned_available[match]
                logger.warning(f"Fuzzy-mapped column '{original}' to '{std_col}' (score {score})")
                mapping[std_col] = original
                used_columns.add(original)

    return mapping


def apply_column_mapping(df, mapping):
    """
    Return a new DataFrame holding only the mapped standard columns,
    with the original index preserved.
    """
    renamed_df = pd.DataFrame(index=df.index)
    for std_col, file_col in mapping.items():
        if file_col is not None and file_col in df.columns:
            renamed_df[std_col] = df[file_col]
    return renamed_df


def get_missing_required_columns(mapping):
    """
    Identify which REQUIRED_COLUMNS are not mapped (i.e., mapping[col] is None).
    """
    return [col for col in REQUIRED_COLUMNS if mapping.get(col) is None]


def profile_from_dataframe(df, length_unit="mm", depth_unit=None, mapping=None):
    """
    Build a DefectProfile from a table of distance / depth samples.

    Parameters:
    - df: pandas.DataFrame with one row per profile station
    - length_unit: unit of the distance column ("mm" or "in")
    - depth_unit: unit of the depth column, defaults to length_unit
    - mapping: optional explicit column mapping, otherwise suggested

    Returns:
    - DefectProfile in mm (caller order kept; evaluators sort)

    Raises:
    - ValueError if a required column cannot be found or a depth is negative
    """
    mapping = mapping or suggest_column_mapping(df)
    missing = get_missing_required_columns(mapping)
    if missing:
        raise ValueError(
            f"Profile data missing required columns: {', '.join(missing)}. "
            f"Available columns: {list(df.columns)}"
        )

    profile_df = apply_column_mapping(df, mapping)
    profile_df = profile_df.apply(pd.to_numeric, errors='coerce')

    incomplete = profile_df[profile_df.isna().any(axis=1)]
    if not incomplete.empty:
        logger.warning(f"Dropping {len(incomplete)} profile rows with missing or non-numeric values")
        profile_df = profile_df.dropna()

    negative = profile_df[profile_df["depth"] < 0]
    if not negative.empty:
        raise ValueError(
            f"Profile contains {len(negative)} negative depths at rows {negative.index.tolist()[:10]}"
        )

    return DefectProfile.from_units(
        zip(profile_df["distance"], profile_df["depth"]),
        distance_unit=length_unit,
        depth_unit=depth_unit or length_unit,
    )


def load_profile_csv(source, length_unit="mm", depth_unit=None):
    """
    Read a river-bottom profile from a CSV path or file-like object.
    """
    df = pd.read_csv(source)
    profile = profile_from_dataframe(df, length_unit=length_unit, depth_unit=depth_unit)
    logger.info(f"Loaded profile with {len(profile)} points from {getattr(source, 'name', source)}")
    return profile


def profile_to_dataframe(profile, unit_system=UnitSystem.METRIC, depth_system=None):
    """
    Tabulate a profile, columns 'distance [unit]' and 'depth [unit]'.

    Distances are given in `unit_system`, depths in `depth_system`
    (defaults to `unit_system`).
    """
    depth_system = depth_system or unit_system
    return pd.DataFrame({
        f"distance [{unit_system.length_unit}]": [length_from_metric(p.distance, unit_system) for p in profile],
        f"depth [{depth_system.length_unit}]": [length_from_metric(p.depth, depth_system) for p in profile],
    })
