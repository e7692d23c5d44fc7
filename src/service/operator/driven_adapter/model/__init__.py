from src.service.operator.driven_adapter.model.operator_model import OperatorModel

__all__ = ['OperatorModel']
