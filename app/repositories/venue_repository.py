from typing import Optional, List, Dict
from decimal import Decimal
from sqlalchemy.orm import Session
from sqlalchemy import func, update
from app.models.venue import Venue, VenueStatus
import uuid


class VenueRepository:
    
    def __init__(self, db: Session):
        self.db = db
    
    def get_by_id(self, venue_id: str) -> Optional[Venue]:
        return self.db.query(Venue).filter(Venue.id == venue_id).first()
    
    def get_for_update(self, venue_id: str) -> Optional[Venue]:
        """
        Load a venue and hold its lock until the session commits or rolls back.

        SQLite ignores FOR UPDATE and opens no transaction for a SELECT, so a
        no-op UPDATE is issued first to take the database write lock before
        the caller runs its checks.
        """
        if self.db.get_bind().dialect.name == "sqlite":
            self.db.execute(
                update(Venue)
                .where(Venue.id == venue_id)
                .values(updated_at=Venue.updated_at)
                .execution_options(synchronize_session=False)
            )
        
        # Refresh an instance already in the identity map with the locked row
        return self.db.query(Venue).filter(
            Venue.id == venue_id
        ).with_for_update().populate_existing().first()
    
    def get_all(
        self,
        status: Optional[VenueStatus] = None,
        city: Optional[str] = None
    ) -> List[Venue]:
        query = self.db.query(Venue)
        if status:
            query = query.filter(Venue.status == status)
        if city:
            query = query.filter(Venue.city.ilike(f"%{city}%"))
        return query.order_by(Venue.name).all()
    
    def create(
        self,
        name: str,
        address: str,
        city: str,
        capacity: int,
        currency: str,
        description: Optional[str] = None,
        price_per_hour: Optional[Decimal] = None,
        price_per_day: Optional[Decimal] = None,
        status: VenueStatus = VenueStatus.ACTIVE
    ) -> Venue:
        venue = Venue(
            id=str(uuid.uuid4()),
            name=name,
            description=description,
            address=address,
            city=city,
            capacity=capacity,
            price_per_hour=price_per_hour,
            price_per_day=price_per_day,
            currency=currency,
            status=status
        )
        
        self.db.add(venue)
        self.db.commit()
        self.db.refresh(venue)
        return venue
    
    def update(self, venue: Venue, **kwargs) -> Venue:
        for key, value in kwargs.items():
            if hasattr(venue, key) and key != 'id':
                setattr(venue, key, value)
        
        self.db.commit()
        self.db.refresh(venue)
        return venue
    
    def delete(self, venue: Venue) -> None:
        self.db.delete(venue)
        self.db.commit()
    
    def get_statistics(self) -> Dict:
        total = self.db.query(func.count(Venue.id)).scalar()
        
        by_status = self.db.query(
            Venue.status, func.count(Venue.id)
        ).group_by(Venue.status).all()
        
        top_cities = self.db.query(
            Venue.city, func.count(Venue.id).label("count")
        ).group_by(Venue.city).order_by(func.count(Venue.id).desc(), Venue.city).limit(5).all()
        
        return {
            "total": total,
            "by_status": {status.value: count for status, count in by_status},
            "top_cities": [{"city": city, "count": count} for city, count in top_cities]
        }
