"""
DogPatch Backend - Seller Rating State
=======================================

What:  The review range constants and the tagged rating state of a seller.
How:   A seller is either `NoReviews` (average shown as the default value) or
       `Rated(count, average)`. `combine()` folds one more rating into the
       state with the incremental mean:

           average_n = average_(n-1) + (rating - average_(n-1)) / n

       The sentinel never takes part in the mean: folding into `NoReviews`
       starts from 0, so the first rating becomes the average exactly.

The running mean is computed in this incremental form, never as sum / count,
so that stored averages match bit-for-bit across implementations.
"""

from dataclasses import dataclass
from typing import Union

MIN_REVIEW_VALUE = 1.0
MAX_REVIEW_VALUE = 5.0
DEFAULT_REVIEW_VALUE = MAX_REVIEW_VALUE - 0.5


@dataclass(frozen=True)
class NoReviews:
    """A seller nobody has reviewed yet."""

    count: int = 0
    average: float = DEFAULT_REVIEW_VALUE


@dataclass(frozen=True)
class Rated:
    count: int
    average: float


RatingState = Union[NoReviews, Rated]


def rating_state(review_count: int, review_rating_average: float) -> RatingState:
    """Reads the tagged state back out of the two stored columns."""
    if review_count == 0:
        return NoReviews()
    return Rated(count=review_count, average=review_rating_average)


def is_valid_rating(rating: float) -> bool:
    return MIN_REVIEW_VALUE <= rating <= MAX_REVIEW_VALUE


def combine(state: RatingState, rating: float) -> Rated:
    """Returns the state after one more review with `rating`."""
    if isinstance(state, NoReviews):
        previous = 0.0
        count = 1
    else:
        previous = state.average
        count = state.count + 1
    return Rated(count=count, average=previous + (rating - previous) / float(count))
