from .models import Order
from .rules import EvaluationContext, OrderRule, RuleOutcome, RuleStage

__all__ = ["Order", "OrderRule", "EvaluationContext", "RuleOutcome", "RuleStage"]
