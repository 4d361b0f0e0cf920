"""
Example: Combining categorical evidence in the log domain.

Three noisy sensors each report a distribution over four classes. Their
product is the fused belief; huge log-probabilities are handled without
overflow.
"""

import numpy as np
from bpmsg import DiscreteMessage, multiply_all


def main():
    sensors = [
        DiscreteMessage.from_probabilities([0.7, 0.1, 0.1, 0.1]),
        DiscreteMessage.from_probabilities([0.4, 0.4, 0.1, 0.1]),
        DiscreteMessage.from_probabilities([0.5, 0.2, 0.2, 0.1]),
    ]

    for i, s in enumerate(sensors):
        print(f"Sensor {i}:{s}")

    fused = multiply_all(sensors)
    print(f"\nFused:   {fused}")
    print(f"log normalizer = {fused.log_normalizer():.6f}")

    # Same fusion with a huge shared offset: probabilities are unchanged
    shifted = DiscreteMessage(fused.log_p + 5000.0)
    print(f"Shifted: {shifted}")
    print(f"Match: {np.allclose(fused.probabilities(), shifted.probabilities())}")


if __name__ == "__main__":
    main()
