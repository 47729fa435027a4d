from typing import Optional, List, Dict
from decimal import Decimal
from datetime import datetime
from sqlalchemy.orm import Session, joinedload
from sqlalchemy import func, or_
from app.models.event import Event, EventStatus, RentalType, ACTIVE_STATUSES
from app.utils.interval import Interval
import uuid


class EventRepository:
    
    def __init__(self, db: Session):
        self.db = db
    
    def get_by_id(self, event_id: str, include_relations: bool = True) -> Optional[Event]:
        query = self.db.query(Event).filter(Event.id == event_id)
        if include_relations:
            query = query.options(joinedload(Event.venue))
        return query.first()
    
    def get_by_venue(
        self,
        venue_id: str,
        status: Optional[EventStatus] = None
    ) -> List[Event]:
        query = self.db.query(Event).filter(Event.venue_id == venue_id)
        
        if status:
            query = query.filter(Event.status == status)
        
        return query.order_by(Event.start_datetime, Event.id).all()
    
    def count_active_for_venue(self, venue_id: str) -> int:
        return self.db.query(func.count(Event.id)).filter(
            Event.venue_id == venue_id,
            Event.status.in_(ACTIVE_STATUSES)
        ).scalar()
    
    def find_conflicts(
        self,
        venue_id: str,
        window: Interval,
        exclude_event_id: Optional[str] = None
    ) -> List[Event]:
        """
        Active events on the venue whose window overlaps ``window``.

        Uses the half-open overlap test, so an event ending exactly at
        ``window.start`` is not returned. Results are ordered by start time
        (then id) so the first conflict is stable for a given input.
        """
        query = self.db.query(Event).filter(
            Event.venue_id == venue_id,
            Event.status.in_(ACTIVE_STATUSES),
            Event.start_datetime < window.end,
            Event.end_datetime > window.start
        )
        
        # Exclude current event if updating
        if exclude_event_id:
            query = query.filter(Event.id != exclude_event_id)
        
        return query.order_by(Event.start_datetime, Event.id).all()
    
    def create(
        self,
        venue_id: str,
        name: str,
        start_datetime: datetime,
        end_datetime: datetime,
        rental_type: RentalType,
        base_price: Decimal,
        discount_percent: Decimal,
        additional_fees: Decimal,
        final_price: Decimal,
        description: Optional[str] = None,
        attendee_count: Optional[int] = None,
        status: EventStatus = EventStatus.UPCOMING
    ) -> Event:
        event = Event(
            id=str(uuid.uuid4()),
            venue_id=venue_id,
            name=name,
            description=description,
            start_datetime=start_datetime,
            end_datetime=end_datetime,
            status=status,
            rental_type=rental_type,
            attendee_count=attendee_count,
            base_price=base_price,
            discount_percent=discount_percent,
            additional_fees=additional_fees,
            final_price=final_price,
            is_paid=False,
            payment_date=None
        )
        
        self.db.add(event)
        self.db.commit()
        self.db.refresh(event)
        return event
    
    def update(self, event: Event, **kwargs) -> Event:
        for key, value in kwargs.items():
            if hasattr(event, key) and key != 'id':
                setattr(event, key, value)
        
        self.db.commit()
        self.db.refresh(event)
        return event
    
    def delete(self, event: Event) -> None:
        self.db.delete(event)
        self.db.commit()
    
    def get_statistics(self, now: datetime) -> Dict:
        total = self.db.query(func.count(Event.id)).scalar()
        
        by_status = self.db.query(
            Event.status, func.count(Event.id)
        ).group_by(Event.status).all()
        
        upcoming = self.db.query(func.count(Event.id)).filter(
            Event.status == EventStatus.UPCOMING,
            Event.start_datetime >= now
        ).scalar()
        ongoing = self.db.query(func.count(Event.id)).filter(
            Event.status == EventStatus.ONGOING,
            Event.start_datetime <= now,
            Event.end_datetime >= now
        ).scalar()
        completed = self.db.query(func.count(Event.id)).filter(
            or_(Event.status == EventStatus.COMPLETED, Event.end_datetime < now)
        ).scalar()
        
        paid = self.db.query(func.count(Event.id)).filter(Event.is_paid == True).scalar()
        
        # Summed in Python so the total stays a Decimal on every backend
        paid_prices = self.db.query(Event.final_price).filter(Event.is_paid == True).all()
        paid_revenue = sum((Decimal(price) for (price,) in paid_prices), Decimal("0"))
        
        return {
            "total": total,
            "by_status": {status.value: count for status, count in by_status},
            "upcoming": upcoming,
            "ongoing": ongoing,
            "completed": completed,
            "paid": paid,
            "unpaid": total - paid,
            "paid_revenue": paid_revenue
        }
