"""Cartesian product of an option set's values."""
import itertools
import logging

from app.variants.errors import TooManyCombinationsError

logger = logging.getLogger(__name__)

DEFAULT_MAX_COMBINATIONS = 1000


def count_combinations(options):
    """Number of combinations ``generate`` would return, without building them."""
    if not options:
        return 0
    total = 1
    for option in options:
        total *= len(option.values)
    return total


def generate(options, max_combinations=DEFAULT_MAX_COMBINATIONS):
    """Return every combination of the options' values as tuples.

    The last option varies fastest, so rows keep a stable order for as long
    as the option set is unchanged. An empty option set yields no
    combinations.

    Raises:
        TooManyCombinationsError if the product exceeds ``max_combinations``
        (pass ``None`` to disable the limit).
    """
    if not options:
        return []

    total = count_combinations(options)
    if max_combinations is not None and total > max_combinations:
        raise TooManyCombinationsError(total, max_combinations)

    combinations = list(itertools.product(*(option.values for option in options)))
    logger.debug(
        "Generated %d combinations from %d options", len(combinations), len(options)
    )
    return combinations
