from dataclasses import dataclass
from typing import List, NamedTuple
import random

from .errors import InvariantViolationError


@dataclass(frozen=True)
class Job:
    job_id: int
    pages: int

    def __str__(self):
        return f"Job {self.job_id} ({self.pages} Pages)"


class PageCountBand(NamedTuple):
    cumulative_weight: int  # out of PAGE_COUNT_WEIGHT_TOTAL
    min_pages: int
    max_pages: int


PAGE_COUNT_WEIGHT_TOTAL = 10

# Lower page counts are more likely: 40% 1-10, 30% 11-25, 20% 26-50, 10% 51-100
PAGE_COUNT_BANDS: List[PageCountBand] = [
    PageCountBand(4, 1, 10),
    PageCountBand(7, 11, 25),
    PageCountBand(9, 26, 50),
    PageCountBand(10, 51, 100),
]


def draw_page_count(rng: random.Random) -> int:
    """Draw a random number of pages for a print job from the weighted bands."""
    roll = rng.randrange(PAGE_COUNT_WEIGHT_TOTAL)
    for band in PAGE_COUNT_BANDS:
        if roll < band.cumulative_weight:
            return rng.randint(band.min_pages, band.max_pages)
    # randrange never reaches the total, the last band always matches
    raise InvariantViolationError(f"Page count roll {roll} outside of configured bands")


class JobFactory:
    """Creates jobs with sequential IDs and randomly drawn page counts."""

    def __init__(self, rng: random.Random, first_job_id: int = 0):
        self.rng = rng
        self.next_job_id = first_job_id

    def create(self) -> Job:
        return self.create_with_pages(draw_page_count(self.rng))

    def create_with_pages(self, pages: int) -> Job:
        if pages <= 0:
            raise ValueError(f"pages must be positive, got {pages}")
        job = Job(self.next_job_id, pages)
        self.next_job_id += 1
        return job
