"""Schedule and IMM date generation."""

from .generator import add_months, generate_schedule, is_end_of_month
from .imm import is_imm_date, next_imm_date, third_wednesday

__all__ = [
    "generate_schedule",
    "add_months",
    "is_end_of_month",
    "is_imm_date",
    "next_imm_date",
    "third_wednesday",
]
