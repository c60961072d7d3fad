from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Path, Query, status

from ..config import Settings, get_settings
from ..deps import get_gateway, get_holidays, get_shop_config
from ..domain.errors import GatewayUnavailable
from ..domain.repositories import CalendarGateway, HolidayCalendar
from ..schemas import DayAvailabilityRead, DaySummaryRead
from ..shop_config import ShopConfig
from ..usecases import availability as availability_usecase
from ..utils.time import today_in

router = APIRouter(prefix="", tags=["availability"])


@router.get("/days", response_model=List[DaySummaryRead])
async def list_days(
    start: Optional[date] = Query(default=None, description="first day (defaults to today at the shop)"),
    days: int = Query(default=7, ge=1, le=31),
    gateway: CalendarGateway = Depends(get_gateway),
    holidays: HolidayCalendar = Depends(get_holidays),
    config: ShopConfig = Depends(get_shop_config),
    settings: Settings = Depends(get_settings),
) -> list[DaySummaryRead]:
    try:
        rows = await availability_usecase.week_summary(
            gateway,
            holidays,
            config=config,
            start=start or today_in(config.zone),
            days=days,
            concurrency=settings.month_summary_concurrency,
        )
    except GatewayUnavailable:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="calendar unavailable")
    return [DaySummaryRead.from_domain(summary=row) for row in rows]


@router.get("/days/{target}/slots", response_model=DayAvailabilityRead)
async def get_day_slots(
    target: date,
    gateway: CalendarGateway = Depends(get_gateway),
    holidays: HolidayCalendar = Depends(get_holidays),
    config: ShopConfig = Depends(get_shop_config),
) -> DayAvailabilityRead:
    try:
        day = await availability_usecase.day_availability(gateway, holidays, config=config, target=target)
    except GatewayUnavailable:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="calendar unavailable")
    return DayAvailabilityRead.from_domain(day=day)


@router.get("/calendar/{year}/{month}", response_model=List[DaySummaryRead])
async def get_month(
    year: int = Path(..., ge=2000, le=2100),
    month: int = Path(..., ge=1, le=12),
    gateway: CalendarGateway = Depends(get_gateway),
    holidays: HolidayCalendar = Depends(get_holidays),
    config: ShopConfig = Depends(get_shop_config),
    settings: Settings = Depends(get_settings),
) -> list[DaySummaryRead]:
    try:
        rows = await availability_usecase.month_summary(
            gateway,
            holidays,
            config=config,
            year=year,
            month=month,
            concurrency=settings.month_summary_concurrency,
        )
    except GatewayUnavailable:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="calendar unavailable")
    return [DaySummaryRead.from_domain(summary=row) for row in rows]
