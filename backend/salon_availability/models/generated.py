from sqlalchemy import Column, ForeignKey, Index, Integer, Text, UniqueConstraint, text
from sqlalchemy.orm import declarative_base, relationship

Base = declarative_base()
metadata = Base.metadata


class Salons(Base):
    __tablename__ = 'salons'

    name = Column(Text, nullable=False)
    id = Column(Integer, primary_key=True)
    is_active = Column(Integer, nullable=False, server_default=text('1'))
    created_at = Column(Text, server_default=text('CURRENT_TIMESTAMP'))

    schedule_configs = relationship('SalonScheduleConfigs', back_populates='salon')
    week_schedules = relationship('SalonWeekSchedules', back_populates='salon')
    schedule_exceptions = relationship('SalonScheduleExceptions', back_populates='salon')
    staff = relationship('Staff', back_populates='salon')
    reservations = relationship('Reservations', back_populates='salon')


class SalonScheduleConfigs(Base):
    __tablename__ = 'salon_schedule_configs'
    __table_args__ = (
        Index('ix_salon_schedule_configs_salon_archive', 'salon_id', 'is_archive'),
    )

    salon_id = Column(ForeignKey('salons.id', ondelete='CASCADE'), nullable=False)
    reservation_interval_minutes = Column(Integer, nullable=False, server_default=text('30'))
    available_sheet = Column(Integer, nullable=False, server_default=text('1'))
    today_first_later_minutes = Column(Integer, nullable=False, server_default=text('0'))
    id = Column(Integer, primary_key=True)
    reservation_limit_days = Column(Integer)
    is_archive = Column(Integer, nullable=False, server_default=text('0'))

    salon = relationship('Salons', back_populates='schedule_configs')


class SalonWeekSchedules(Base):
    __tablename__ = 'salon_week_schedules'
    __table_args__ = (
        Index('ix_salon_week_schedules_salon_week_archive', 'salon_id', 'day_of_week', 'is_archive'),
    )

    salon_id = Column(ForeignKey('salons.id', ondelete='CASCADE'), nullable=False)
    day_of_week = Column(Text, nullable=False)  # monday .. sunday
    is_open = Column(Integer, nullable=False, server_default=text('0'))
    id = Column(Integer, primary_key=True)
    start_hour = Column(Text)  # "HH:MM"
    end_hour = Column(Text)
    is_archive = Column(Integer, nullable=False, server_default=text('0'))

    salon = relationship('Salons', back_populates='week_schedules')


class SalonScheduleExceptions(Base):
    __tablename__ = 'salon_schedule_exceptions'
    __table_args__ = (
        Index('ix_salon_schedule_exceptions_salon_date_type_archive', 'salon_id', 'date', 'type', 'is_archive'),
    )

    salon_id = Column(ForeignKey('salons.id', ondelete='CASCADE'), nullable=False)
    date = Column(Text, nullable=False)  # YYYY-MM-DD
    type = Column(Text, nullable=False, server_default=text("'holiday'"))
    id = Column(Integer, primary_key=True)
    is_archive = Column(Integer, nullable=False, server_default=text('0'))

    salon = relationship('Salons', back_populates='schedule_exceptions')


class Staff(Base):
    __tablename__ = 'staff'

    salon_id = Column(ForeignKey('salons.id', ondelete='CASCADE'), nullable=False)
    name = Column(Text, nullable=False)
    id = Column(Integer, primary_key=True)
    is_active = Column(Integer, nullable=False, server_default=text('1'))
    is_archive = Column(Integer, nullable=False, server_default=text('0'))

    salon = relationship('Salons', back_populates='staff')
    config = relationship('StaffConfigs', back_populates='staff', uselist=False)
    week_schedules = relationship('StaffWeekSchedules', back_populates='staff')
    schedules = relationship('StaffSchedules', back_populates='staff')
    reservations = relationship('Reservations', back_populates='staff')


class StaffConfigs(Base):
    __tablename__ = 'staff_configs'
    __table_args__ = (
        UniqueConstraint('staff_id'),
    )

    staff_id = Column(ForeignKey('staff.id', ondelete='CASCADE'), nullable=False)
    id = Column(Integer, primary_key=True)
    priority = Column(Integer)
    extra_charge = Column(Integer)
    is_archive = Column(Integer, nullable=False, server_default=text('0'))

    staff = relationship('Staff', back_populates='config')


class StaffWeekSchedules(Base):
    __tablename__ = 'staff_week_schedules'
    __table_args__ = (
        Index('ix_staff_week_schedules_staff_week_archive', 'staff_id', 'day_of_week', 'is_archive'),
    )

    staff_id = Column(ForeignKey('staff.id', ondelete='CASCADE'), nullable=False)
    day_of_week = Column(Text, nullable=False)
    is_open = Column(Integer, nullable=False, server_default=text('0'))
    id = Column(Integer, primary_key=True)
    start_hour = Column(Text)
    end_hour = Column(Text)
    is_archive = Column(Integer, nullable=False, server_default=text('0'))

    staff = relationship('Staff', back_populates='week_schedules')


class StaffSchedules(Base):
    __tablename__ = 'staff_schedules'
    __table_args__ = (
        Index('ix_staff_schedules_staff_date_archive', 'staff_id', 'date', 'is_archive'),
    )

    staff_id = Column(ForeignKey('staff.id', ondelete='CASCADE'), nullable=False)
    date = Column(Text, nullable=False)
    type = Column(Text, nullable=False, server_default=text("'other'"))
    is_all_day = Column(Integer, nullable=False, server_default=text('0'))
    id = Column(Integer, primary_key=True)
    start_time_unix = Column(Integer)
    end_time_unix = Column(Integer)
    notes = Column(Text)
    is_archive = Column(Integer, nullable=False, server_default=text('0'))

    staff = relationship('Staff', back_populates='schedules')


class Reservations(Base):
    __tablename__ = 'reservations'
    __table_args__ = (
        Index('ix_reservations_staff_start_status', 'staff_id', 'start_time_unix', 'status'),
        Index('ix_reservations_salon_start_status', 'salon_id', 'start_time_unix', 'status'),
    )

    salon_id = Column(ForeignKey('salons.id', ondelete='CASCADE'), nullable=False)
    staff_id = Column(ForeignKey('staff.id', ondelete='CASCADE'), nullable=False)
    date = Column(Text, nullable=False)
    start_time_unix = Column(Integer, nullable=False)
    end_time_unix = Column(Integer, nullable=False)
    status = Column(Text, nullable=False, server_default=text("'pending'"))
    id = Column(Integer, primary_key=True)
    customer_name = Column(Text)
    is_archive = Column(Integer, nullable=False, server_default=text('0'))
    created_at = Column(Text, nullable=False, server_default=text('CURRENT_TIMESTAMP'))

    salon = relationship('Salons', back_populates='reservations')
    staff = relationship('Staff', back_populates='reservations')
