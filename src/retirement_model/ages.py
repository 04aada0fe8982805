# Copyright 2025 Spencer Williams
#
# Use of this source code is governed by an MIT license:
# https://github.com/sw23/life-model/blob/main/LICENSE
import math
from datetime import date

DAYS_PER_YEAR = 365.25


def age(birthdate: date, reference_date: date) -> int:
    """Whole years completed between birthdate and reference_date."""
    return math.floor((reference_date - birthdate).days / DAYS_PER_YEAR)


def _birthday_in(birthdate: date, year: int) -> date:
    try:
        return birthdate.replace(year=year)
    except ValueError:
        # Feb 29 in a non-leap year rolls forward to Mar 1
        return date(year, 3, 1)


def first_year_fraction(birthdate: date, reference_date: date) -> float:
    """Portion of a year left until the next birthday, clamped to [0, 1].

    Used to prorate expenses, Social Security income and growth for the
    partial first year between the reference date and the next birthday.
    """
    next_birthday = _birthday_in(birthdate, reference_date.year)
    if reference_date > next_birthday:
        next_birthday = _birthday_in(birthdate, reference_date.year + 1)
    fraction = (next_birthday - reference_date).days / DAYS_PER_YEAR
    return max(0.0, min(1.0, fraction))
