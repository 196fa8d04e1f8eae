# homeserve/services/ratings.py
import logging
from typing import Optional, Sequence

logger = logging.getLogger(__name__)


def average_rating(ratings: Sequence[float]) -> Optional[float]:
    if not ratings:
        return None
    return sum(ratings) / len(ratings)


async def recompute_provider_rating(bookings, providers, provider_id: str) -> Optional[float]:
    """
    Recalculate a provider's rating from every reviewed booking.

    The whole history is read on each call, so the stored rating is always
    the plain mean of all ratings the provider has received.
    """
    ratings = await bookings.ratings_for_provider(provider_id)
    rating = average_rating(ratings)
    if rating is None:
        return None

    await providers.update(provider_id, {"rating": rating})
    logger.info(f"Provider {provider_id} rating is now {rating:.2f} over {len(ratings)} reviews")
    return rating
