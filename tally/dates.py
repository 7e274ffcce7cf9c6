"""Date utilities for tally."""

import pandas as pd


def normalize_date(value: str) -> str:
    """Convert a user-entered date to YYYY-MM-DD.

    Accepts ISO dates as well as day-first formats such as 15/01/2024.

    Args:
        value: Date text.

    Returns:
        ISO formatted date.

    Raises:
        ValueError: If the text is not a date.
    """
    text = value.strip()
    try:
        # ISO input is parsed strictly; dayfirst would only add a pandas warning here
        parsed = pd.to_datetime(text, format="ISO8601")
    except (ValueError, TypeError, OverflowError):
        try:
            parsed = pd.to_datetime(text, dayfirst=True)
        except (ValueError, TypeError, OverflowError) as e:
            raise ValueError(f"Invalid date: {value!r}") from e
    if pd.isna(parsed):
        raise ValueError(f"Invalid date: {value!r}")
    return parsed.strftime("%Y-%m-%d")
