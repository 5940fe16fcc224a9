"""Layer stack with per-sample training and an accuracy-seeking retry loop."""

from __future__ import annotations

from typing import Mapping, Sequence

from ..core import matrix as mx
from ..core.matrix import Matrix
from ..core.types import GenerateResult, ModelDescription
from ..data.dataset import Dataset
from .layers import DenseLayer
from .losses import mse, mse_loss_gradient


class ConvergenceError(RuntimeError):
    """Raised when ``generate_model`` exhausts an explicit attempt cap."""

    def __init__(self, attempts: int, best_accuracy: float, minimum_accuracy: float) -> None:
        super().__init__(
            f"No model reached accuracy {minimum_accuracy:.2f} within {attempts} "
            f"attempts (best {best_accuracy:.2f})"
        )
        self.attempts = attempts
        self.best_accuracy = best_accuracy
        self.minimum_accuracy = minimum_accuracy


class Network:
    """Ordered stack of :class:`DenseLayer` objects trained one sample at a time."""

    def __init__(
        self,
        dataset: Dataset,
        layers: Sequence[DenseLayer],
        epochs: int,
        show_outputs: bool = False,
        *,
        callbacks: Sequence[object] | None = None,
    ) -> None:
        if not layers:
            raise ValueError("Network requires at least one layer")
        if epochs < 0:
            raise ValueError(f"epochs must be non-negative, got {epochs}")
        self.dataset = dataset
        self.layers = list(layers)
        self.epochs = int(epochs)
        self.show_outputs = bool(show_outputs)
        self.callbacks = list(callbacks or [])
        self._attempt = 0

    def describe(self) -> ModelDescription:
        dims = [self.layers[0].in_dim] + [layer.out_dim for layer in self.layers]
        return ModelDescription(
            layer_dims=dims,
            activations=[layer.activation.name for layer in self.layers],
        )

    # ------------------------------------------------------------------
    # Propagation

    def forward(self, inputs: Matrix) -> Matrix:
        output = inputs
        for layer in self.layers:
            output = layer.forward(output)
        return output

    def backward(self, loss_gradient: Matrix) -> None:
        grad = loss_gradient
        for layer in reversed(self.layers):
            grad = layer.backward(grad)

    @staticmethod
    def mse_loss_gradient(predicted: Matrix, target: Matrix) -> Matrix:
        return mse_loss_gradient(predicted, target)

    def classify(self, inputs: Matrix) -> Matrix:
        return mx.one_hot_by_argmax(self.forward(inputs))

    # ------------------------------------------------------------------
    # Training control

    def train(self) -> float:
        """Run ``epochs`` unbatched passes over the training cursor.

        Returns the mean loss of the final epoch (``nan`` when ``epochs`` is 0).
        """

        size = self.dataset.training_set_size
        epoch_loss = float("nan")
        for epoch in range(1, self.epochs + 1):
            total = 0.0
            for _ in range(size):
                inputs, label = self.dataset.next_training()
                prediction = self.forward(inputs)
                loss_value, _ = mse(prediction, label)
                total += loss_value
                self.backward(self.mse_loss_gradient(prediction, label))
            epoch_loss = total / size
            self._emit("on_epoch", epoch, {"attempt": self._attempt, "loss": epoch_loss})
        return epoch_loss

    def test(self) -> float:
        """Return classification accuracy over one pass of the testing cursor."""

        # The pass length follows the training set size.
        size = self.dataset.training_set_size
        correct = 0
        for _ in range(size):
            inputs, label = self.dataset.next_testing()
            classification = self.classify(inputs)
            if self.show_outputs:
                print(f"Network input:\n{inputs}")
                print(f"Input labels:\n{label}")
                print(f"Network classifications:\n{classification}\n")
            if classification == label:
                correct += 1
        accuracy = correct / size
        if self.show_outputs:
            print(f"Testing resulted in a model accuracy of: {accuracy * 100.0}%")
        return accuracy

    def reset_model(self) -> None:
        for layer in self.layers:
            layer.reset_weights_and_biases()

    def generate_model(
        self, minimum_accuracy: float, max_attempts: int | None = None
    ) -> GenerateResult:
        """Reset, train and test until ``minimum_accuracy`` is reached.

        With ``max_attempts=None`` the loop is unbounded and only returns on
        success; an architecture that cannot reach the target never stops.
        """

        if max_attempts is not None and max_attempts < 1:
            raise ValueError(f"max_attempts must be positive, got {max_attempts}")
        best_accuracy = 0.0
        self._attempt = 0
        while max_attempts is None or self._attempt < max_attempts:
            self._attempt += 1
            if self.show_outputs:
                print(f"\n\nTraining round: {self._attempt}")
            self.reset_model()
            loss = self.train()
            accuracy = self.test()
            best_accuracy = max(best_accuracy, accuracy)
            self._emit("on_attempt", self._attempt, {"accuracy": accuracy, "loss": loss})
            if accuracy >= minimum_accuracy:
                if self.show_outputs:
                    print(f" after {self._attempt} rounds of training.")
                return GenerateResult(attempts=self._attempt, accuracy=accuracy, loss=loss)
        raise ConvergenceError(self._attempt, best_accuracy, minimum_accuracy)

    def _emit(self, hook: str, index: int, metrics: Mapping[str, float]) -> None:
        for callback in self.callbacks:
            if hasattr(callback, hook):
                getattr(callback, hook)(index, metrics)


__all__ = ["ConvergenceError", "Network"]
