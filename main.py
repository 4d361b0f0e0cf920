#!/usr/bin/env python3
"""
bpmsg: Message algebra for belief propagation

Gaussian and categorical messages with product/quotient algebra and
log-normalization constants.

Usage:
    # Combine two Gaussian messages given as mean/variance
    python main.py gaussian --mean-var 0,1 --mean-var 1,2

    # Combine two Gaussian messages given in natural parameters
    python main.py gaussian --natural 0,1 --natural 0,0.5 --json

    # Combine two discrete messages given as log-probabilities
    python main.py discrete --log-p "0,2,-1" --log-p "1,0,1"

    # Run demos
    python main.py demo --example gaussian

    # Run tests
    python main.py test
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Any, Dict, List

import numpy as np

# Handle imports whether running as package or directly
try:
    from bpmsg import (
        DiscreteMessage,
        GaussianMessage,
        MessageError,
        absdiff,
        has_converged,
        log_norm_product,
        log_norm_ratio,
        logsumexp,
        multiply_all,
        __version__,
    )
except ImportError:
    sys.path.insert(0, str(Path(__file__).parent))
    from bpmsg import (
        DiscreteMessage,
        GaussianMessage,
        MessageError,
        absdiff,
        has_converged,
        log_norm_product,
        log_norm_ratio,
        logsumexp,
        multiply_all,
        __version__,
    )


def parse_pair(text: str) -> tuple:
    """Parse 'a,b' into two floats."""
    parts = [p.strip() for p in text.split(',')]
    if len(parts) != 2:
        raise argparse.ArgumentTypeError(f"expected two comma-separated numbers, got '{text}'")
    try:
        return float(parts[0]), float(parts[1])
    except ValueError:
        raise argparse.ArgumentTypeError(f"not a number in '{text}'")


def parse_vector(text: str) -> List[float]:
    """Parse '0,2,-1' into a list of floats ('-inf' allowed)."""
    try:
        return [float(p.strip()) for p in text.split(',') if p.strip()]
    except ValueError:
        raise argparse.ArgumentTypeError(f"not a list of numbers: '{text}'")


def gaussian_to_dict(g: GaussianMessage) -> Dict[str, Any]:
    return {
        "tau": g.tau,
        "rho": g.rho,
        "mean": None if g.rho == 0 else g.mean,
        "variance": None if g.rho == 0 else g.variance,
    }


def build_gaussians(args) -> List[GaussianMessage]:
    msgs = [GaussianMessage(tau, rho) for tau, rho in (args.natural or [])]
    msgs += [GaussianMessage.from_mean_variance(m, v) for m, v in (args.mean_var or [])]
    return msgs


def cmd_gaussian(args):
    """Execute the gaussian command."""
    try:
        msgs = build_gaussians(args)
    except MessageError as e:
        print(f"Error: {e}")
        return 1

    if len(msgs) != 2:
        print("Error: Must specify exactly two messages via --natural and/or --mean-var")
        return 1

    g1, g2 = msgs
    product = g1 * g2
    quotient = g1 / g2
    try:
        log_z_ratio = log_norm_ratio(g1, g2)
    except MessageError:
        log_z_ratio = None

    result = {
        "g1": gaussian_to_dict(g1),
        "g2": gaussian_to_dict(g2),
        "product": gaussian_to_dict(product),
        "quotient": gaussian_to_dict(quotient),
        "log_norm_product": log_norm_product(g1, g2),
        "log_norm_ratio": log_z_ratio,
        "absdiff": absdiff(g1, g2),
    }

    if args.json:
        print(json.dumps(result, indent=2))
        return 0

    print(f"\nMessages:")
    print(f"  g1: {g1}   (tau={g1.tau}, rho={g1.rho})")
    print(f"  g2: {g2}   (tau={g2.tau}, rho={g2.rho})")
    print(f"\nResults:")
    print(f"  g1 * g2: {product}")
    print(f"  g1 / g2: {quotient}" + ("" if quotient.is_proper else "   (improper)"))
    print(f"  log Z (product) = {result['log_norm_product']:.10f}")
    if log_z_ratio is None:
        print(f"  log Z (ratio)   = undefined (g2 is more precise than g1)")
    else:
        print(f"  log Z (ratio)   = {log_z_ratio:.10f}")
    print(f"  absdiff(g1, g2) = {result['absdiff']:.10f}")
    return 0


def cmd_discrete(args):
    """Execute the discrete command."""
    if not args.log_p:
        print("Error: Must specify at least one message via --log-p")
        return 1

    try:
        msgs = [DiscreteMessage(v) for v in args.log_p]
        product = multiply_all(msgs)
        quotient = msgs[0] / msgs[1] if len(msgs) == 2 else None
    except MessageError as e:
        print(f"Error: {e}")
        return 1

    if args.json:
        output = {
            "messages": [m.probabilities().tolist() for m in msgs],
            "product": product.probabilities().tolist(),
            "log_normalizer": product.log_normalizer(),
        }
        if quotient is not None:
            output["quotient"] = quotient.probabilities().tolist()
        print(json.dumps(output, indent=2))
        return 0

    print(f"\nMessages ({product.n} outcomes):")
    for i, m in enumerate(msgs):
        print(f"  p{i + 1}:{m}")
    print(f"\nResults:")
    print(f"  product: {product}")
    if quotient is not None:
        print(f"  p1 / p2: {quotient}")
    print(f"  log normalizer of product = {product.log_normalizer():.10f}")
    return 0


def demo_gaussian():
    """Demo: Gaussian product and quotient"""
    print("=" * 60)
    print("Demo: Gaussian Messages")
    print("=" * 60)

    g = GaussianMessage.standard()
    h = g * g
    print(f"\nN(0, 1) * N(0, 1) = {h}")
    print(f"log Z (product)   = {log_norm_product(g, g):.6f}")

    q = GaussianMessage(0, 1) / GaussianMessage(0, 0.5)
    print(f"\nN(0, 1) / N(0, 2) = {q}")
    print(f"log Z (ratio)     = {log_norm_ratio(GaussianMessage(0, 1), GaussianMessage(0, 0.5)):.6f}")

    back = h / g
    print(f"\n(g * g) / g       = {back}")
    match = absdiff(back, g) < 1e-12
    print(f"Match: {match}")

    return match


def demo_discrete():
    """Demo: Discrete product and quotient"""
    print("=" * 60)
    print("Demo: Discrete Messages")
    print("=" * 60)

    p = DiscreteMessage([0.0, 2.0, -1.0])
    q = DiscreteMessage([1.0, 0.0, 1.0])
    print(f"\np     ={p}")
    print(f"q     ={q}")
    print(f"p * q ={p * q}")
    print(f"p / q ={p / q}")

    big = DiscreteMessage([1000.0, 1000.0])
    print(f"\nlog_p = [1000, 1000] ->{big}")
    print(f"logsumexp = {logsumexp(big.log_p):.6f}")

    match = np.allclose(big.probabilities(), [0.5, 0.5])
    print(f"Match: {match}")

    return match


def demo_fusion():
    """Demo: Fusing noisy measurements and leave-one-out cavities"""
    print("=" * 60)
    print("Demo: Fusion of Gaussian Measurements")
    print("=" * 60)

    rng = np.random.default_rng(0)
    true_value = 2.5
    noise_var = 0.5

    measurements = [
        GaussianMessage.from_mean_variance(x, noise_var)
        for x in rng.normal(true_value, np.sqrt(noise_var), size=50)
    ]
    belief = multiply_all([GaussianMessage.improper()] + measurements)
    print(f"\nPosterior after {len(measurements)} measurements: {belief}")

    # Cavity = belief without one measurement; multiplying it back must
    # reproduce the belief.
    cavities = [belief / m for m in measurements]
    restored = [c * m for c, m in zip(cavities, measurements)]
    consistent = has_converged([belief] * len(restored), restored, tol=1e-6)
    print(f"Cavities consistent: {consistent}")

    close = abs(belief.mean - true_value) < 0.5
    print(f"Within 0.5 of true value {true_value}: {close}")

    return consistent and close


def cmd_demo(args):
    """Execute the demo command."""
    demos = {
        "gaussian": demo_gaussian,
        "discrete": demo_discrete,
        "fusion": demo_fusion,
    }

    names = list(demos) if args.example == "all" else [args.example]
    failed = [name for name in names if not demos[name]()]

    if len(names) > 1:
        print("=" * 60)
        for name in names:
            print(f"  {name}: {'FAIL' if name in failed else 'PASS'}")

    return 1 if failed else 0


def cmd_test(args):
    """Execute the test command."""
    import subprocess

    test_dir = Path(__file__).parent / "tests"
    if not test_dir.exists():
        print(f"Test directory not found: {test_dir}")
        return 1

    cmd = [sys.executable, "-m", "pytest", str(test_dir)]
    if args.verbose:
        cmd.append("-v")
    if args.coverage:
        cmd.extend(["--cov=bpmsg", "--cov-report=term-missing"])

    print(f"Running: {' '.join(cmd)}")
    result = subprocess.run(cmd, cwd=Path(__file__).parent)
    return result.returncode


def cmd_info(args):
    """Display system information."""
    print(f"bpmsg v{__version__}")
    print(f"Message algebra for belief propagation")
    print()
    print("Message kinds:")
    print("  gaussian - 1D Gaussian in natural parameters (tau = mean/var, rho = 1/var)")
    print("  discrete - categorical over n outcomes, unnormalized log-probabilities")
    print()
    print("Python:", sys.version.split()[0])
    print("NumPy:", np.__version__)

    try:
        import scipy
        print("SciPy:", scipy.__version__)
    except ImportError:
        print("SciPy: not installed (needed by the test suite)")

    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="bpmsg",
        description="bpmsg: Message algebra for belief propagation",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Two Gaussians from mean,variance
  bpmsg gaussian --mean-var 0,1 --mean-var 1,2

  # Two Gaussians from tau,rho with JSON output
  bpmsg gaussian --natural 0,1 --natural 0,0.5 --json

  # Two discrete messages
  bpmsg discrete --log-p "0,2" --log-p "1,0"

  # Run demos
  bpmsg demo --example all

  # Run tests
  bpmsg test -v
"""
    )

    parser.add_argument(
        "--version", "-V",
        action="version",
        version=f"bpmsg {__version__}"
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Gaussian command
    gauss_parser = subparsers.add_parser("gaussian", help="Combine two Gaussian messages")
    gauss_parser.add_argument(
        "--natural", "-n",
        type=parse_pair,
        action="append",
        metavar="TAU,RHO",
        help="Message in natural parameters (repeatable)"
    )
    gauss_parser.add_argument(
        "--mean-var", "-m",
        type=parse_pair,
        action="append",
        metavar="MEAN,VAR",
        help="Message from mean and variance (repeatable)"
    )
    gauss_parser.add_argument("--json", action="store_true", help="Emit JSON")

    # Discrete command
    disc_parser = subparsers.add_parser("discrete", help="Combine discrete messages")
    disc_parser.add_argument(
        "--log-p", "-l",
        type=parse_vector,
        action="append",
        metavar="V1,V2,...",
        help="Unnormalized log-probabilities (repeatable)"
    )
    disc_parser.add_argument("--json", action="store_true", help="Emit JSON")

    # Demo command
    demo_parser = subparsers.add_parser("demo", help="Run demonstration examples")
    demo_parser.add_argument(
        "--example", "-e",
        choices=["gaussian", "discrete", "fusion", "all"],
        default="all",
        help="Which example to run (default: all)"
    )

    # Test command
    test_parser = subparsers.add_parser("test", help="Run test suite")
    test_parser.add_argument("--verbose", "-v", action="store_true", help="Verbose output")
    test_parser.add_argument("--coverage", "-c", action="store_true", help="With coverage")

    # Info command
    subparsers.add_parser("info", help="Show system information")

    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    if args.command == "gaussian":
        return cmd_gaussian(args)
    elif args.command == "discrete":
        return cmd_discrete(args)
    elif args.command == "demo":
        return cmd_demo(args)
    elif args.command == "test":
        return cmd_test(args)
    elif args.command == "info":
        return cmd_info(args)
    else:
        parser.print_help()
        return 1


if __name__ == "__main__":
    sys.exit(main())
