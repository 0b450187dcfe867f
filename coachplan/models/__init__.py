from .user import User
from .library_exercise import LibraryExercise

from .template_folder import TemplateFolder
from .plan_template import PlanTemplate
from .template_block import TemplateBlock
from .template_exercise import TemplateExercise

from .weekly_plan import WeeklyPlan
from .plan_block import Block
from .plan_exercise import Exercise
from .workout_session import WorkoutSession
from .rest_interval import RestInterval
from .active_week import ActiveWeek

__all__ = [
    "User", "LibraryExercise",
    "TemplateFolder", "PlanTemplate", "TemplateBlock", "TemplateExercise",
    "WeeklyPlan", "Block", "Exercise",
    "WorkoutSession", "RestInterval", "ActiveWeek",
]
