"""
Description length data model.

Holds the two-part description length of a model and the data under it.
"""

from dataclasses import dataclass
from typing import Any, Dict


@dataclass(frozen=True)
class Encoding:
    """
    Two-part description length, in nats.

    Attributes
    ----------
    of_data : float
        Negative log-likelihood of the data under the model
    of_model : float
        Structural cost of the summary (BIC penalty or MDL code length)
    """
    of_data: float = 0.0
    of_model: float = 0.0

    @property
    def objective(self) -> float:
        """Total description length; lower is better."""
        return self.of_data + self.of_model

    def to_dict(self) -> Dict[str, Any]:
        return {
            'of_data': self.of_data,
            'of_model': self.of_model,
            'objective': self.objective,
        }

    def __repr__(self) -> str:
        return (
            f"Encoding(objective={self.objective:.4f}, "
            f"data={self.of_data:.4f}, model={self.of_model:.4f})"
        )
