"""
SQLAlchemy database models.
These define the database schema for the nutrition catalog, the per-user domain records
and the diagnostic log.
"""
import uuid
from sqlalchemy import Column, String, Float, Boolean, DateTime, JSON, Text, UniqueConstraint
from sqlalchemy.orm import declarative_base
from datetime import datetime

Base = declarative_base()


def _new_id() -> str:
    return str(uuid.uuid4())


class FoodModel(Base):
    """Nutrition catalog row, values per 100 g (or 100 ml for liquids)."""
    __tablename__ = "foods"

    id = Column(String(36), primary_key=True, default=_new_id)
    name = Column(String(255), nullable=False)
    # lower(name) with whitespace collapsed; one row per normalized name
    name_norm = Column(String(255), nullable=False, unique=True, index=True)
    calories = Column(Float, nullable=False, default=0)
    protein = Column(Float, nullable=False, default=0)
    carbs = Column(Float, nullable=False, default=0)
    fat = Column(Float, nullable=False, default=0)
    is_liquid = Column(Boolean, nullable=False, default=False)
    serving_sizes_ml = Column(JSON, nullable=True)  # {"can": 330, "bottle": 500, "glass": 250}
    preparation = Column(String(20), nullable=False, default="cooked")  # "cooked" or "uncooked"
    created_at = Column(DateTime, default=datetime.utcnow)


class ScheduleItemModel(Base):
    """Daily schedule item. Times are stored in UTC."""
    __tablename__ = "schedule_items"

    id = Column(String(36), primary_key=True, default=_new_id)
    user_id = Column(String(64), nullable=False, index=True)
    title = Column(String(255), nullable=False)
    date = Column(String(10), nullable=False)  # YYYY-MM-DD
    start_time = Column(String(5), nullable=False)  # HH:MM
    end_time = Column(String(5), nullable=False)
    category = Column(String(50), nullable=False, default="Other")
    recurrence = Column(String(20), nullable=True)  # "daily", "weekdays", "weekends"
    created_at = Column(DateTime, default=datetime.utcnow)


class TransactionModel(Base):
    """Income or expense record."""
    __tablename__ = "transactions"

    id = Column(String(36), primary_key=True, default=_new_id)
    user_id = Column(String(64), nullable=False, index=True)
    type = Column(String(10), nullable=False)  # "income" or "expense"
    amount = Column(Float, nullable=False)
    currency = Column(String(3), nullable=False, default="USD")
    category = Column(String(50), nullable=False, default="Other")
    description = Column(Text, nullable=True)
    date = Column(String(10), nullable=False)
    is_recurring = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime, default=datetime.utcnow)


class WorkoutModel(Base):
    """Logged workout with optional strength exercises."""
    __tablename__ = "workouts"

    id = Column(String(36), primary_key=True, default=_new_id)
    user_id = Column(String(64), nullable=False, index=True)
    date = Column(String(10), nullable=False)
    title = Column(String(255), nullable=False, default="Workout")
    type = Column(String(20), nullable=False, default="cardio")
    duration_minutes = Column(Float, nullable=False, default=30)
    exercises = Column(JSON, nullable=False, default=list)  # [{"name", "sets", "reps", "weight"}]
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)


class FoodEntryModel(Base):
    """Food or drink a user logged, with nutrition already scaled to the portion."""
    __tablename__ = "food_entries"

    id = Column(String(36), primary_key=True, default=_new_id)
    user_id = Column(String(64), nullable=False, index=True)
    date = Column(String(10), nullable=False)
    name = Column(String(255), nullable=False)
    calories = Column(Float, nullable=False, default=0)
    protein = Column(Float, nullable=False, default=0)
    carbs = Column(Float, nullable=False, default=0)
    fats = Column(Float, nullable=False, default=0)
    portion_amount = Column(Float, nullable=True)
    portion_unit = Column(String(20), nullable=True)
    start_time = Column(String(5), nullable=True)
    end_time = Column(String(5), nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)


class DailyCheckInModel(Base):
    """One check-in (sleep hours) per user per day."""
    __tablename__ = "daily_check_ins"
    __table_args__ = (UniqueConstraint("user_id", "date", name="uq_check_in_user_date"),)

    id = Column(String(36), primary_key=True, default=_new_id)
    user_id = Column(String(64), nullable=False, index=True)
    date = Column(String(10), nullable=False)
    sleep_hours = Column(Float, nullable=False, default=0)
    created_at = Column(DateTime, default=datetime.utcnow)


class GoalModel(Base):
    """Target for calories, workouts or savings over a period."""
    __tablename__ = "goals"

    id = Column(String(36), primary_key=True, default=_new_id)
    user_id = Column(String(64), nullable=False, index=True)
    type = Column(String(20), nullable=False)  # "calories", "workouts", "savings"
    target = Column(Float, nullable=False, default=0)
    period = Column(String(10), nullable=False, default="weekly")
    created_at = Column(DateTime, default=datetime.utcnow)


class AppLogModel(Base):
    """Diagnostic events, e.g. transcripts the voice pipeline could not understand."""
    __tablename__ = "app_logs"

    id = Column(String(36), primary_key=True, default=_new_id)
    level = Column(String(10), nullable=False, default="error")
    message = Column(Text, nullable=False)
    details = Column(JSON, nullable=True)
    user_id = Column(String(64), nullable=True, index=True)
    created_at = Column(DateTime, default=datetime.utcnow)
