"""Worked example: store 1.0±0.1 + 2.0±0.2 and watch the entropy go up.

Usage:
  python examples/worked_example.py
"""

from floatens import FloatEnsemble, entropy_increase, get_interval


def main() -> None:
    x = FloatEnsemble.make(1.0, 0.1)
    y = FloatEnsemble.make(2.0, 0.2)

    report = entropy_increase(x, y)
    print(f"interval           : {get_interval(report.exact)}")
    print(f"H(exact_add)       : {report.exact_entropy:.6f}  (trapezoid)")
    print(f"H(float_add)       : {report.stored_entropy:.6f}  (uniform)")
    print(f"entropy added      : {report.gap:.6f} nats")


if __name__ == "__main__":
    main()
