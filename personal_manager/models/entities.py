# personal_manager/models/entities.py
from datetime import date

from sqlalchemy import Column, Integer, String, Date, Time, Float, Text, DateTime, UniqueConstraint

from personal_manager.utils.clock import utcnow
from .db import Base


class OwnedRecord:
    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    owner_id = Column(Integer, index=True, nullable=False)
    created_at = Column(DateTime, nullable=False, default=utcnow)


class User(Base):
    __tablename__ = "users"
    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    username = Column(String(50), unique=True, nullable=False)
    # stored as entered; this deployment is single-user
    password = Column(String(255), nullable=False)
    email = Column(String(100), nullable=True)
    created_at = Column(DateTime, nullable=False, default=utcnow)


class Module(OwnedRecord, Base):
    __tablename__ = "modules"
    __table_args__ = (UniqueConstraint("owner_id", "code", name="uq_modules_owner_code"),)
    code = Column(String(20), nullable=False)
    name = Column(String(100), nullable=False)
    lecturer = Column(String(100), nullable=True, default="")
    semester = Column(Integer, nullable=False, default=1)
    year = Column(Integer, nullable=False, default=1)


class ExamEntry(OwnedRecord, Base):
    __tablename__ = "timetable"
    module_code = Column(String(20), nullable=False)
    module_name = Column(String(100), nullable=False)
    date = Column("exam_date", Date, index=True, nullable=False)
    time = Column("exam_time", Time, nullable=False)
    venue = Column(String(100), nullable=True, default="")


class MarkEntry(OwnedRecord, Base):
    __tablename__ = "marks"
    # module name/lecturer are a snapshot taken when the mark was recorded
    module_id = Column(Integer, index=True, nullable=False)
    module_name = Column(String(100), nullable=False)
    lecturer = Column(String(100), nullable=True, default="")
    category = Column(String(30), nullable=False, default="test01")
    marks = Column(Float, nullable=False)
    date = Column("marks_date", Date, nullable=False, default=date.today)


class MoneyRecord(OwnedRecord, Base):
    __tablename__ = "money_records"
    person = Column("person_name", String(100), nullable=False)
    amount = Column(Float, nullable=False)
    borrow_date = Column(Date, nullable=False)
    return_date = Column("expected_return_date", Date, nullable=True)
    status = Column(String(20), index=True, nullable=False, default="pending")


class SavingsEntry(OwnedRecord, Base):
    __tablename__ = "savings"
    amount = Column(Float, nullable=False)
    date = Column("savings_date", Date, nullable=False)


class Appointment(OwnedRecord, Base):
    __tablename__ = "appointments"
    name = Column(String(100), nullable=False)
    place = Column(String(100), nullable=True, default="")
    date = Column("appointment_date", Date, nullable=False)
    time = Column("appointment_time", Time, nullable=False)
    aim = Column(Text, nullable=True, default="")
    notification = Column(String(10), nullable=False, default="none")
    status = Column(String(20), index=True, nullable=False, default="upcoming")


class Journey(OwnedRecord, Base):
    __tablename__ = "journeys"
    journey_from = Column(String(100), nullable=False)
    journey_to = Column(String(100), nullable=False)
    date = Column("journey_date", Date, nullable=False)
    time = Column("journey_time", Time, nullable=False)
    transport_cost = Column(Float, nullable=False, default=0)
    food_cost = Column(Float, nullable=False, default=0)
    status = Column(String(20), index=True, nullable=False, default="pending")

    @property
    def total_cost(self) -> float:
        return (self.transport_cost or 0) + (self.food_cost or 0)


class SchoolFee(OwnedRecord, Base):
    __tablename__ = "school_fees"
    year = Column(Integer, nullable=False)
    semester = Column(String(20), nullable=False)
    amount = Column(Float, nullable=False)
    payment_date = Column(Date, nullable=False)
    payment_method = Column(String(30), nullable=False, default="cash")


class ActivityLogEntry(OwnedRecord, Base):
    __tablename__ = "activities"
    description = Column(String(255), nullable=False)
    type = Column(String(50), nullable=False)
    status = Column(String(20), nullable=False, default="completed")
