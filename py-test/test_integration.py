import pytest
import numpy as np
import os
import sys
import shutil

import h5py

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from quadratic_fit_demo import DemoParameters, run_demo, export_results, main


class TestIntegration:
    """Integration tests that run the demonstration driver and check outputs"""

    @pytest.fixture(autouse=True)
    def setup_and_teardown(self):
        """Setup and cleanup for each test"""
        self.test_output_dir = 'test_fit_output'
        os.makedirs(self.test_output_dir, exist_ok=True)

        yield

        if os.path.exists(self.test_output_dir):
            shutil.rmtree(self.test_output_dir)

    def test_demo_recovers_generator(self):
        """Default demo recovers the known coefficients"""
        params = DemoParameters(output_dir=self.test_output_dir)
        fit, x_values, y_values, coefficients = run_demo(params)

        assert fit.size() == 8
        assert len(x_values) == 8
        assert np.all((x_values >= -1) & (x_values < 1))
        assert coefficients == pytest.approx([1.23, -9.87, 1e-2], rel=1e-9, abs=1e-10)

    def test_demo_is_reproducible(self):
        params = DemoParameters(output_dir=self.test_output_dir, seed=3)
        _, x_first, _, c_first = run_demo(params)
        _, x_second, _, c_second = run_demo(params)
        assert np.array_equal(x_first, x_second)
        assert np.array_equal(c_first, c_second)

    def test_csv_export(self):
        params = DemoParameters(output_dir=self.test_output_dir, n=12)
        _, x_values, y_values, _ = run_demo(params)

        csv_path = os.path.join(self.test_output_dir, 'quadratic_fit.csv')
        assert os.path.exists(csv_path)
        data = np.loadtxt(csv_path, delimiter=',')
        assert data.shape == (12, 2)
        assert np.allclose(data[:, 0], x_values)
        assert np.allclose(data[:, 1], y_values)

    def test_h5_export(self):
        params = DemoParameters(output_dir=self.test_output_dir, format='h5')
        _, x_values, _, coefficients = run_demo(params)

        h5_path = os.path.join(self.test_output_dir, 'quadratic_fit.h5')
        with h5py.File(h5_path, 'r') as f:
            assert f['parameters'].attrs['n'] == 8
            assert np.allclose(f['x'][:], x_values)
            assert np.allclose(f['coefficients'][:], coefficients)

    def test_unknown_format_rejected(self):
        params = DemoParameters(output_dir=self.test_output_dir, format='xml')
        with pytest.raises(ValueError):
            export_results(os.path.join(self.test_output_dir, 'out'),
                           np.zeros(1), np.zeros(1), np.zeros(3), params)

    def test_plot_saved(self):
        params = DemoParameters(output_dir=self.test_output_dir, plot=True)
        run_demo(params)
        assert os.path.exists(os.path.join(self.test_output_dir, 'quadratic_fit.png'))

    def test_float32_demo(self):
        params = DemoParameters(output_dir=self.test_output_dir, dtype='float32', n=20)
        fit, _, _, coefficients = run_demo(params)
        assert coefficients.dtype == np.float32
        assert coefficients == pytest.approx([1.23, -9.87, 1e-2], abs=1e-2)

    def test_degenerate_demo_does_not_crash(self):
        """An under-determined run still completes and exports"""
        params = DemoParameters(output_dir=self.test_output_dir, n=2)
        fit, _, _, coefficients = run_demo(params)
        assert fit.size() == 2
        assert coefficients.shape == (3,)
        assert os.path.exists(os.path.join(self.test_output_dir, 'quadratic_fit.csv'))

    def test_main_prints_coefficients(self, capsys):
        assert main(['--output-dir', self.test_output_dir, '--seed', '11']) == 0
        out = capsys.readouterr().out
        assert 'Point 7:' in out
        assert 'a = ' in out
        assert 'b = ' in out
        assert 'c = ' in out
