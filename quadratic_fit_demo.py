#!/usr/bin/env python3
"""
quadratic_fit_demo.py

Fits a quadratic to samples drawn from a known curve and prints the
recovered coefficients for comparison with the generator.
"""

import numpy as np
import matplotlib.pyplot as plt
from dataclasses import dataclass
import argparse
import logging
import os
import sys

import h5py

# Add src-local to path for utilities
sys.path.append(os.path.join(os.path.dirname(os.path.abspath(__file__)), 'src-local'))
from quadratic_fit import QuadraticFit
from fit_utils import evaluate

logger = logging.getLogger(__name__)

DTYPES = {
    'float32': np.float32,
    'float64': np.float64,
    'longdouble': np.longdouble,
}


@dataclass
class DemoParameters:
    """Parameters for the demonstration run"""
    n: int = 8                 # Number of samples
    seed: int = 0              # Random generator seed
    a: float = 1.23            # Generator coefficient of x^2
    b: float = -9.87           # Generator coefficient of x
    c: float = 1e-2            # Generator constant term
    dtype: str = 'float64'     # Scalar type of the fit
    output_dir: str = 'output'
    format: str = 'csv'        # 'csv' or 'h5'
    plot: bool = False


def export_results(filename, x_values, y_values, coefficients, params: DemoParameters):
    """
    Write samples and fitted coefficients to disk

    Args:
        filename: Output path without extension
        format: 'csv' or 'h5' (taken from params)
    """
    if params.format == 'csv':
        path = filename + '.csv'
        data = np.column_stack((x_values, y_values))
        header = (f"a={coefficients[0]},b={coefficients[1]},c={coefficients[2]}\n"
                  "x,y")
        np.savetxt(path, data, delimiter=',', header=header, comments='# ')
    elif params.format == 'h5':
        path = filename + '.h5'
        with h5py.File(path, 'w') as f:
            params_grp = f.create_group('parameters')
            params_grp.attrs['a'] = params.a
            params_grp.attrs['b'] = params.b
            params_grp.attrs['c'] = params.c
            params_grp.attrs['n'] = params.n
            params_grp.attrs['seed'] = params.seed

            f.create_dataset('x', data=x_values)
            f.create_dataset('y', data=y_values)
            f.create_dataset('coefficients', data=coefficients)
    else:
        raise ValueError(f"Unknown format: {params.format}")
    logger.info(f"Results exported to {path}")
    return path


def plot_fit(x_values, y_values, coefficients, params: DemoParameters, GUI=False):
    """Plot samples, generator curve and fitted curve"""
    x_dense = np.linspace(-1, 1, 200)

    fig, ax = plt.subplots(figsize=(8, 5))
    ax.plot(x_dense, evaluate((params.a, params.b, params.c), x_dense), '-',
            color='#1f77b4', linewidth=2.5, label='generator')
    ax.plot(x_dense, evaluate(coefficients, x_dense), '--',
            color='#d62728', linewidth=1.5, label='fit')
    ax.plot(x_values, y_values, 'ko', markersize=5, label='samples')
    ax.set_xlabel('x', fontsize=12)
    ax.set_ylabel('y', fontsize=12)
    ax.set_title('Least-squares quadratic fit', fontsize=14, fontweight='bold')
    ax.grid(True, alpha=0.3)
    ax.legend()

    textstr = (f'a = {coefficients[0]:.6g}\nb = {coefficients[1]:.6g}\n'
               f'c = {coefficients[2]:.6g}')
    props = dict(boxstyle='round', facecolor='wheat', alpha=0.5)
    ax.text(0.02, 0.05, textstr, transform=ax.transAxes, fontsize=10,
            verticalalignment='bottom', bbox=props)

    plt.tight_layout()
    if GUI:
        plt.show()
    else:
        path = os.path.join(params.output_dir, 'quadratic_fit.png')
        plt.savefig(path, dpi=150, bbox_inches='tight')
        logger.info(f"Plot saved to {path}")
    plt.close(fig)


def run_demo(params: DemoParameters = None, GUI=False):
    """Run the demonstration fit

    Args:
        params: Demo parameters, defaults if None
        GUI (bool): If True, display the plot. If False, save it to output_dir.

    Returns:
        tuple: (fit, x_values, y_values, coefficients)
    """
    params = params if params else DemoParameters()
    if params.dtype not in DTYPES:
        raise ValueError(f"Unknown dtype: {params.dtype}")
    dtype = DTYPES[params.dtype]

    # Set matplotlib backend based on GUI parameter
    if params.plot and not GUI:
        import matplotlib
        matplotlib.use('Agg')  # Use non-interactive backend

    os.makedirs(params.output_dir, exist_ok=True)

    rng = np.random.default_rng(params.seed)
    fit = QuadraticFit(params.n, dtype=dtype)

    for i in range(params.n):
        x = dtype(rng.uniform(-1, 1))
        y = evaluate((dtype(params.a), dtype(params.b), dtype(params.c)), x)
        fit.add(x, y)
        print(f"Point {i}: ({x}, {y})")

    result = fit.result()
    coefficients = result.coefficients
    if not result.success:
        logger.warning(result.message)

    x_values = np.array([s.x for s in fit], dtype=dtype)
    y_values = np.array([s.y for s in fit], dtype=dtype)

    export_results(os.path.join(params.output_dir, 'quadratic_fit'),
                   x_values, y_values, coefficients, params)
    if params.plot:
        plot_fit(x_values, y_values, coefficients, params, GUI=GUI)

    return fit, x_values, y_values, coefficients


def main(argv=None):
    """Run the demonstration from the command line."""
    parser = argparse.ArgumentParser(
        description='Least-squares quadratic fit of samples from a known curve'
    )
    parser.add_argument('--n', type=int, default=8,
                        help='Number of samples')
    parser.add_argument('--seed', type=int, default=0,
                        help='Random generator seed')
    parser.add_argument('--a', type=float, default=1.23,
                        help='Generator coefficient of x^2')
    parser.add_argument('--b', type=float, default=-9.87,
                        help='Generator coefficient of x')
    parser.add_argument('--c', type=float, default=1e-2,
                        help='Generator constant term')
    parser.add_argument('--dtype', choices=sorted(DTYPES), default='float64',
                        help='Scalar type of the fit')
    parser.add_argument('--output-dir', type=str, default='output',
                        help='Output directory')
    parser.add_argument('--format', choices=['csv', 'h5'], default='csv',
                        help='Export format')
    parser.add_argument('--plot', action='store_true',
                        help='Plot samples and fitted curve')
    parser.add_argument('--gui', action='store_true',
                        help='Show the plot instead of saving it')

    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO,
                        format='%(asctime)s - %(levelname)s - %(message)s')

    params = DemoParameters(n=args.n, seed=args.seed, a=args.a, b=args.b, c=args.c,
                            dtype=args.dtype, output_dir=args.output_dir,
                            format=args.format, plot=args.plot or args.gui)

    fit, x_values, y_values, coefficients = run_demo(params, GUI=args.gui)

    print(f"a = {coefficients[0]}")
    print(f"b = {coefficients[1]}")
    print(f"c = {coefficients[2]}")
    return 0


if __name__ == '__main__':
    sys.exit(main())
