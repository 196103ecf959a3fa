"""Hotel search endpoint.

GET /hotels/by-name?name=...   → hotels matching name (case-insensitive)
"""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, Query

from hotelbook.domain.hotels import HotelNameError, get_hotel_by_name
from hotelbook.domain.models import Hotel, Room
from hotelbook.observability.logging import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/hotels", tags=["hotels"])


def room_to_dict(room: Room, hotel_name: str) -> dict:
    return {
        "hotel_name": hotel_name,
        "room_type": room.room_type.label,
        "room_number": room.room_number,
        "price_per_night": float(room.price_per_night),
        "capacity": room.capacity,
    }


def hotel_to_dict(hotel: Hotel) -> dict:
    return {
        "name": hotel.name,
        "address": hotel.address,
        "phone": hotel.phone,
        "rooms": [room_to_dict(room, hotel.name) for room in hotel.rooms],
    }


@router.get("/by-name")
def hotels_by_name(name: str = Query("", description="Hotel name (min 3 characters)")) -> list[dict]:
    """Find hotels by name.

    Returns:
        200 with matching hotels (possibly empty list).
        422 if name is blank or shorter than 3 characters.
    """
    try:
        hotels = get_hotel_by_name(name)
    except HotelNameError as exc:
        logger.info(
            "hotel search rejected",
            extra={"extra_fields": {"reason": str(exc), "name_length": len(name)}},
        )
        raise HTTPException(status_code=422, detail=str(exc))

    return [hotel_to_dict(hotel) for hotel in hotels]
