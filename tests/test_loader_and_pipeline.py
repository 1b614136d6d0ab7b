import io
import tempfile
import unittest
import zipfile
from contextlib import redirect_stdout
from pathlib import Path
from unittest import mock

import matplotlib
matplotlib.use("Agg")
import pandas as pd

from crypto_RecordBenchmark.core.errors import (
    ConfigError,
    RecordLoadError,
    UnsupportedAlgorithmError,
)
from crypto_RecordBenchmark.core.matrix import DEFAULT_MATRIX, TrialMatrix, matrix_from_config
from crypto_RecordBenchmark.core.model import Record, TrialSpec
from crypto_RecordBenchmark.core.pipeline import run_pipeline, run_trials
from crypto_RecordBenchmark.loaders import csv_loader
from crypto_RecordBenchmark.main import main

KEY_16 = "1234567890123456"

CSV_5_ROWS = (
    "id,mother,birth_date,weight_g\n"
    "001,Anna,2001-04-09,3200\n"
    "002,Bea,2001-04-10,\n"
    "003,Cleo,2001-04-11,2950\n"
    "004,Dora,2001-04-12,3475\n"
    "005,Eve,2001-04-13,3010\n"
)


def _small_cfg(**overrides):
    cfg = {
        "matrix": {"batch_sizes": [3], "algorithms": ["AES"], "keys": {"AES": [KEY_16]}},
        "reports": {"format": "csv", "summary": False},
        "plot": {"enabled": False},
        "logging": {"verbose": False},
    }
    cfg.update(overrides)
    return cfg


class LoaderTests(unittest.TestCase):
    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.tmp = Path(self._tmp.name)

    def tearDown(self):
        self._tmp.cleanup()

    def test_rows_and_columns_keep_order_and_strings(self):
        path = self.tmp / "births.csv"
        path.write_text(CSV_5_ROWS, encoding="utf-8")
        records = csv_loader.load(path)
        self.assertEqual(5, len(records))
        self.assertEqual(["id", "mother", "birth_date", "weight_g"], list(records[0]))
        self.assertEqual("001", records[0]["id"])
        self.assertEqual("", records[1]["weight_g"])
        self.assertEqual(["001", "002", "003", "004", "005"], [r["id"] for r in records])

    def test_records_are_immutable(self):
        path = self.tmp / "births.csv"
        path.write_text(CSV_5_ROWS, encoding="utf-8")
        rec = csv_loader.load(path)[0]
        with self.assertRaises(Exception):
            rec.fields = ()
        with self.assertRaises(TypeError):
            rec["id"] = "999"

    def test_delimiter_from_config(self):
        path = self.tmp / "births.csv"
        path.write_text("a;b\n1;2\n", encoding="utf-8")
        records = csv_loader.load(path, {"input": {"delimiter": ";"}})
        self.assertEqual({"a": "1", "b": "2"}, dict(records[0]))

    def test_zip_uses_first_csv_member(self):
        path = self.tmp / "births.zip"
        with zipfile.ZipFile(path, "w") as zf:
            zf.writestr("b.csv", "x\nfrom_b\n")
            zf.writestr("a.csv", "x\nfrom_a\n")
            zf.writestr("notes.txt", "ignored")
        records = csv_loader.load(path)
        self.assertEqual([{"x": "from_a"}], [dict(r) for r in records])

    def test_failures_raise_record_load_error(self):
        empty = self.tmp / "empty.csv"
        empty.write_text("", encoding="utf-8")
        no_csv = self.tmp / "no_csv.zip"
        with zipfile.ZipFile(no_csv, "w") as zf:
            zf.writestr("readme.txt", "nothing")
        for path in (self.tmp / "missing.csv", empty, no_csv):
            with self.subTest(path=path.name):
                with self.assertRaises(RecordLoadError):
                    csv_loader.load(path)


class MatrixTests(unittest.TestCase):
    def test_default_matrix_matches_benchmark_plan(self):
        self.assertEqual(9, len(DEFAULT_MATRIX.batch_sizes))
        self.assertEqual(9 * 6, len(DEFAULT_MATRIX))
        self.assertEqual(len(DEFAULT_MATRIX), len(list(DEFAULT_MATRIX.iter_trials())))
        self.assertEqual(DEFAULT_MATRIX, matrix_from_config({}))

    def test_nested_iteration_order(self):
        m = TrialMatrix((1, 2), ("AES", "DES"), {"AES": ("k1", "k2"), "DES": ("d1",)})
        got = [(t.batch_size, t.algorithm, t.key) for t in m.iter_trials()]
        self.assertEqual([
            (1, "AES", "k1"), (1, "AES", "k2"), (1, "DES", "d1"),
            (2, "AES", "k1"), (2, "AES", "k2"), (2, "DES", "d1"),
        ], got)

    def test_invalid_matrix_rejected(self):
        bad = [
            {"matrix": {"batch_sizes": [-1]}},
            {"matrix": {"batch_sizes": ["many"]}},
            {"matrix": {"algorithms": ["BLOWFISH"]}},
            {"matrix": {"algorithms": ["AES"], "keys": {"AES": []}}},
            {"matrix": {"batch_sizes": 3000}},
        ]
        for cfg in bad:
            with self.subTest(cfg=cfg):
                with self.assertRaises(ConfigError):
                    matrix_from_config(cfg)

    def test_unknown_algorithm_with_keys_passes_config(self):
        m = matrix_from_config({"matrix": {"algorithms": ["BLOWFISH"], "keys": {"BLOWFISH": ["k"]}}})
        self.assertEqual(("BLOWFISH",), m.algorithms)


class RunTrialsTests(unittest.TestCase):
    def setUp(self):
        self.records = [Record.from_pairs([("id", str(i))]) for i in range(5)]

    def test_one_row_per_trial_in_order(self):
        trials = [TrialSpec(2, "AES", KEY_16), TrialSpec(2, "RC4", KEY_16), TrialSpec(4, "DES", "12345678")]
        rows, results = run_trials(self.records, trials, verbose=False)
        self.assertEqual([("AES", 128, 2), ("RC4", 128, 2), ("DES", 56, 4)],
                         [(r.algorithm, r.key_length, r.records) for r in rows])
        self.assertEqual([2, 2, 4], [r.n_records for r in results])

    def test_oversized_batch_uses_available_records(self):
        rows, results = run_trials(self.records, [TrialSpec(10, "3DES", "123456789012345678901234")], verbose=False)
        self.assertEqual(10, rows[0].records)
        self.assertEqual(5, results[0].n_records)

    def test_first_failure_aborts(self):
        trials = [TrialSpec(1, "AES", KEY_16), TrialSpec(1, "IDEA", "k"), TrialSpec(1, "RC4", KEY_16)]
        with self.assertRaises(UnsupportedAlgorithmError):
            run_trials(self.records, trials, verbose=False)

    def test_results_keep_counts_but_not_ciphertexts(self):
        trials = [TrialSpec(5, algo, KEY_16) for algo in ("AES", "RC4")] * 2
        rows, results = run_trials(self.records, trials, verbose=False)
        self.assertEqual(4, len(results))
        self.assertEqual([(), (), (), ()], [r.encrypted_records for r in results])
        self.assertEqual([5, 5, 5, 5], [r.n_records for r in results])


class PipelineTests(unittest.TestCase):
    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.tmp = Path(self._tmp.name)
        self.input = self.tmp / "births.csv"
        self.input.write_text(CSV_5_ROWS, encoding="utf-8")
        self.out_root = self.tmp / "out"

    def tearDown(self):
        self._tmp.cleanup()

    def test_single_trial_end_to_end(self):
        outputs = run_pipeline(_small_cfg(), self.out_root, input_path=self.input)
        df = pd.read_csv(outputs["csv"])
        self.assertEqual(1, len(df))
        row = df.iloc[0]
        self.assertEqual("AES", row["Algorithm"])
        self.assertEqual(128, row["Key Length (bits)"])
        self.assertEqual(3, row["Records"])
        self.assertGreaterEqual(row["Encryption Time (s)"], 0.0)
        self.assertEqual("encryption_benchmark_results.csv", outputs["csv"].name)

    def test_repeated_runs_give_same_trials(self):
        cfg = _small_cfg(matrix={
            "batch_sizes": [2, 5],
            "algorithms": ["AES", "DES", "3DES", "RC4"],
        })
        triples = []
        for i in range(2):
            outputs = run_pipeline(cfg, self.out_root / f"run{i}", input_path=self.input)
            df = pd.read_csv(outputs["csv"])
            triples.append(list(zip(df["Algorithm"], df["Key Length (bits)"], df["Records"])))
        self.assertEqual(12, len(triples[0]))
        self.assertEqual(triples[0], triples[1])

    def test_missing_input_writes_nothing(self):
        with self.assertRaises(RecordLoadError):
            run_pipeline(_small_cfg(), self.out_root, input_path=self.tmp / "missing.csv")
        self.assertFalse(self.out_root.exists())

    def test_unsupported_algorithm_writes_nothing(self):
        cfg = _small_cfg(matrix={"batch_sizes": [3], "algorithms": ["AES", "IDEA"],
                                 "keys": {"AES": [KEY_16], "IDEA": ["k"]}})
        with self.assertRaises(UnsupportedAlgorithmError):
            run_pipeline(cfg, self.out_root, input_path=self.input)
        self.assertFalse(self.out_root.exists())

    def test_optional_outputs(self):
        cfg = _small_cfg(reports={"format": "both", "summary": True},
                         plot={"enabled": True, "file_name": "timing.png"})
        outputs = run_pipeline(cfg, self.out_root, input_path=self.input)
        self.assertEqual({"csv", "mat", "summary", "plot"}, set(outputs))
        for p in outputs.values():
            self.assertTrue(p.exists(), p)
        summary = pd.read_csv(outputs["summary"])
        self.assertEqual(["AES"], summary["Algorithm"].tolist())

    def test_bad_report_format_fails_before_any_trial(self):
        cfg = _small_cfg(reports={"format": "xlsx"})
        with mock.patch("crypto_RecordBenchmark.core.pipeline.measure_encryption") as measure:
            with self.assertRaises(ConfigError):
                run_pipeline(cfg, self.out_root, input_path=self.input)
        measure.assert_not_called()
        self.assertFalse(self.out_root.exists())

    def test_empty_sections_fall_back_to_defaults(self):
        cfg = _small_cfg(input=None, output=None, reports=None, plot=None)
        outputs = run_pipeline(cfg, self.out_root, input_path=self.input)
        self.assertEqual({"csv", "summary"}, set(outputs))
        self.assertEqual(1, len(pd.read_csv(outputs["csv"])))


class MainTests(unittest.TestCase):
    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.tmp = Path(self._tmp.name)
        (self.tmp / "births.csv").write_text(CSV_5_ROWS, encoding="utf-8")
        self.cfg_path = self.tmp / "config.yaml"

    def tearDown(self):
        self._tmp.cleanup()

    def _write_config(self, reports="  summary: false\n", matrix="  batch_sizes: [5]\n  algorithms: [3DES]\n"):
        self.cfg_path.write_text(
            "input:\n"
            f"  path: {(self.tmp / 'births.csv').as_posix()}\n"
            "output:\n"
            f"  root: {(self.tmp / 'out').as_posix()}\n"
            "  basename: bench\n"
            "matrix:\n" + matrix +
            "reports:\n" + reports +
            "plot:\n"
            "logging:\n"
            "  verbose: false\n",
            encoding="utf-8",
        )

    def test_main_reads_config_and_writes_report(self):
        self._write_config()
        main(self.cfg_path)
        df = pd.read_csv(self.tmp / "out" / "bench.csv")
        self.assertEqual([("3DES", 168, 5)],
                         list(zip(df["Algorithm"], df["Key Length (bits)"], df["Records"])))

    def test_unreadable_config_raises(self):
        buf = io.StringIO()
        with redirect_stdout(buf), self.assertRaises(ConfigError):
            main(self.tmp / "nope.yaml")
        self.assertIn("[ERROR]", buf.getvalue())

    def test_bad_report_format_prints_error_before_trials(self):
        self._write_config(reports="  format: xlsx\n")
        buf = io.StringIO()
        with mock.patch("crypto_RecordBenchmark.core.pipeline.measure_encryption") as measure:
            with redirect_stdout(buf), self.assertRaises(ConfigError):
                main(self.cfg_path)
        measure.assert_not_called()
        self.assertIn("[ERROR] benchmark run failed", buf.getvalue())
        self.assertFalse((self.tmp / "out").exists())

    def test_unexpected_error_is_reported_and_reraised(self):
        self._write_config()
        buf = io.StringIO()
        with mock.patch("crypto_RecordBenchmark.main.run_pipeline", side_effect=RuntimeError("disk on fire")):
            with redirect_stdout(buf), self.assertRaises(RuntimeError):
                main(self.cfg_path)
        self.assertIn("[ERROR] benchmark run failed: disk on fire", buf.getvalue())

    def test_empty_reports_section_uses_defaults(self):
        self._write_config(reports="")
        main(self.cfg_path)
        self.assertTrue((self.tmp / "out" / "bench.csv").exists())
        self.assertTrue((self.tmp / "out" / "bench_summary.csv").exists())


if __name__ == "__main__":
    unittest.main()
