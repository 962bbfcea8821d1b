from datetime import datetime

import pytest

from candlechart.db.loader import CandleDataError, read_candles_csv, to_records
from tests.conftest import CSV_HEADER


def _write(tmp_path, *rows, header=CSV_HEADER):
    path = tmp_path / "candles.csv"
    path.write_text("\n".join([header, *rows]) + "\n")
    return path


class TestReadCandlesCSV:
    def test_valid_file_sorted(self, tmp_path):
        path = _write(
            tmp_path,
            "2024-02-02 00:00:00,11,12,10,11.5,200",
            "2024-02-01 00:00:00,10,11,9,10.5,100",
        )
        df = read_candles_csv(path)
        assert list(df["close"]) == [10.5, 11.5]
        assert df["timestamp"].iloc[0] == datetime(2024, 2, 1)

    def test_header_case_and_extra_columns(self, tmp_path):
        path = _write(
            tmp_path,
            "2024-02-01 00:00:00,10,11,9,10.5,100,x",
            header="Timestamp,Open,High,Low,Close,Volume,Symbol",
        )
        df = read_candles_csv(path)
        assert list(df.columns) == ["timestamp", "open", "high", "low", "close", "volume"]

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            read_candles_csv(tmp_path / "nope.csv")

    def test_missing_column(self, tmp_path):
        path = _write(tmp_path, "2024-02-01 00:00:00,10,11,9,10.5", header="timestamp,open,high,low,close")
        with pytest.raises(CandleDataError, match="volume"):
            read_candles_csv(path)

    def test_missing_value(self, tmp_path):
        path = _write(tmp_path, "2024-02-01 00:00:00,10,11,,10.5,100")
        with pytest.raises(CandleDataError, match="missing or non-numeric"):
            read_candles_csv(path)

    def test_nan_value(self, tmp_path):
        path = _write(tmp_path, "2024-02-01 00:00:00,10,11,9,NaN,100")
        with pytest.raises(CandleDataError):
            read_candles_csv(path)

    def test_negative_volume(self, tmp_path):
        path = _write(tmp_path, "2024-02-01 00:00:00,10,11,9,10.5,-1")
        with pytest.raises(CandleDataError, match="negative"):
            read_candles_csv(path)

    def test_high_below_close(self, tmp_path):
        path = _write(
            tmp_path,
            "2024-02-01 00:00:00,10,11,9,10.5,100",
            "2024-02-02 00:00:00,10,11,9,12,100",
        )
        with pytest.raises(CandleDataError, match="line 3"):
            read_candles_csv(path)

    def test_duplicate_timestamp(self, tmp_path):
        path = _write(
            tmp_path,
            "2024-02-01 00:00:00,10,11,9,10.5,100",
            "2024-02-01 00:00:00,10,11,9,10.6,100",
        )
        with pytest.raises(CandleDataError, match="Duplicate"):
            read_candles_csv(path)


def test_to_records(tmp_path):
    path = _write(tmp_path, "2024-02-01 00:00:00,10,11,9,10.5,100")
    records = to_records(read_candles_csv(path))
    assert records == [
        {
            "timestamp": datetime(2024, 2, 1),
            "open": 10.0,
            "high": 11.0,
            "low": 9.0,
            "close": 10.5,
            "volume": 100.0,
        }
    ]
    assert type(records[0]["timestamp"]) is datetime
