from sqlalchemy import Column, Float, ForeignKey, Index, Integer, Text, UniqueConstraint, text
from sqlalchemy.orm import declarative_base, relationship

Base = declarative_base()
metadata = Base.metadata


class Clients(Base):
    __tablename__ = 'clients'

    id = Column(Integer, primary_key=True)
    first_name = Column(Text, nullable=False)
    last_name = Column(Text)
    phone = Column(Text)
    email = Column(Text)
    notes = Column(Text)
    is_active = Column(Integer, nullable=False, server_default=text('1'))
    created_at = Column(Text, server_default=text('CURRENT_TIMESTAMP'))

    reservations = relationship('Reservations', back_populates='client')


class Therapists(Base):
    __tablename__ = 'therapists'

    id = Column(Integer, primary_key=True)
    first_name = Column(Text, nullable=False)
    last_name = Column(Text)
    phone = Column(Text)
    # Weekly template: {"mon": {"start": "10:00", "end": "18:00"}, ...}
    # or {"0": ["10:00", "18:00"], ...}; per-date work_shifts rows win.
    work_schedule = Column(Text, nullable=False, server_default=text("'{}'"))
    is_active = Column(Integer, nullable=False, server_default=text('1'))
    created_at = Column(Text, server_default=text('CURRENT_TIMESTAMP'))

    shifts = relationship('WorkShifts', back_populates='therapist')
    reservations = relationship('Reservations', back_populates='therapist')

    @property
    def display_name(self) -> str:
        return " ".join(p for p in (self.first_name, self.last_name) if p)


class Rooms(Base):
    __tablename__ = 'rooms'

    id = Column(Integer, primary_key=True)
    name = Column(Text, nullable=False, unique=True)
    display_order = Column(Integer)
    notes = Column(Text)
    is_active = Column(Integer, nullable=False, server_default=text('1'))

    reservations = relationship('Reservations', back_populates='room')


class Services(Base):
    __tablename__ = 'services'

    id = Column(Integer, primary_key=True)
    name = Column(Text, nullable=False)
    category = Column(Text)
    description = Column(Text)
    is_active = Column(Integer, nullable=False, server_default=text('1'))

    variants = relationship('ServiceVariants', back_populates='service')
    reservations = relationship('Reservations', back_populates='service')


class ServiceVariants(Base):
    __tablename__ = 'service_variants'

    id = Column(Integer, primary_key=True)
    service_id = Column(ForeignKey('services.id', ondelete='CASCADE'), nullable=False)
    duration_minutes = Column(Integer, nullable=False)
    regular_price = Column(Float, nullable=False)
    promo_price = Column(Float)

    service = relationship('Services', back_populates='variants')
    reservations = relationship('Reservations', back_populates='variant')


class WorkShifts(Base):
    __tablename__ = 'work_shifts'
    __table_args__ = (
        UniqueConstraint('therapist_id', 'date'),
    )

    id = Column(Integer, primary_key=True)
    therapist_id = Column(ForeignKey('therapists.id', ondelete='CASCADE'), nullable=False)
    date = Column(Text, nullable=False)  # YYYY-MM-DD
    start_minute = Column(Integer, nullable=False)
    end_minute = Column(Integer, nullable=False)
    status = Column(Text, nullable=False, server_default=text("'working'"))

    therapist = relationship('Therapists', back_populates='shifts')


class Reservations(Base):
    __tablename__ = 'reservations'
    __table_args__ = (
        Index('ix_reservations_therapist_date', 'therapist_id', 'date'),
        Index('ix_reservations_room_date', 'room_id', 'date'),
    )

    id = Column(Integer, primary_key=True)
    number = Column(Text, unique=True)
    client_id = Column(ForeignKey('clients.id'), nullable=False)
    therapist_id = Column(ForeignKey('therapists.id'), nullable=False)
    room_id = Column(ForeignKey('rooms.id'), nullable=False)
    service_id = Column(ForeignKey('services.id'), nullable=False)
    variant_id = Column(ForeignKey('service_variants.id'), nullable=False)
    date = Column(Text, nullable=False)  # YYYY-MM-DD
    start_minute = Column(Integer, nullable=False)
    end_minute = Column(Integer, nullable=False)

    # snapshot of the variant at booking time
    duration_minutes = Column(Integer, nullable=False)
    price = Column(Float, nullable=False)

    status = Column(Text, nullable=False, server_default=text("'new'"))
    payment_status = Column(Text, nullable=False, server_default=text("'unpaid'"))
    payment_method = Column(Text)
    source = Column(Text)
    notes = Column(Text)
    created_by = Column(Integer)
    created_at = Column(Text, nullable=False, server_default=text('CURRENT_TIMESTAMP'))
    updated_at = Column(Text, nullable=False, server_default=text('CURRENT_TIMESTAMP'))

    client = relationship('Clients', back_populates='reservations')
    therapist = relationship('Therapists', back_populates='reservations')
    room = relationship('Rooms', back_populates='reservations')
    service = relationship('Services', back_populates='reservations')
    variant = relationship('ServiceVariants', back_populates='reservations')
