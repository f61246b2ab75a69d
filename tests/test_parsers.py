"""
Tests for log parsers.
"""

import pytest

from logsift.exceptions import IngestionError
from logsift.parsers.json_parser import JSONLogParser
from logsift.parsers.reader import LogFileReader


PINO_LINE = '{"level":30,"time":1531171074631,"msg":"hello world","pid":657,"hostname":"Davids-MBP-3.fritz.box"}'


class TestJSONLogParser:
    """Tests for JSONLogParser."""
    
    def setup_method(self):
        self.parser = JSONLogParser()
    
    def test_can_parse_json(self):
        assert self.parser.can_parse(PINO_LINE) is True
    
    def test_can_parse_non_json(self):
        line = "Jan 15 03:22:15 server sshd[12345]: Failed password for admin"
        assert self.parser.can_parse(line) is False
    
    def test_can_parse_json_array(self):
        assert self.parser.can_parse("[1, 2, 3]") is False
    
    def test_parse_pino_log(self):
        record = self.parser.parse_line(PINO_LINE, 1)
        
        assert record.level_code() == 30
        assert record.message() == "hello world"
        assert record.timestamp_ms() == 1531171074631
        assert record.get("hostname") == "Davids-MBP-3.fritz.box"
    
    def test_parse_keeps_raw_names(self):
        record = self.parser.parse_line('{"msg":"hi","lvl":40}')
        
        assert set(record.fields) == {"msg", "lvl"}
    
    def test_parse_nested_values(self):
        record = self.parser.parse_line('{"req":{"id":1},"tags":["a","b"],"ok":null}')
        
        assert record.get("req") == {"id": 1}
        assert record.get("tags") == ["a", "b"]
        assert record.get("ok") is None
        assert "ok" in record.fields
    
    def test_parse_empty_line(self):
        with pytest.raises(IngestionError) as exc_info:
            self.parser.parse_line("   ", 7)
        
        assert exc_info.value.line_number == 7
        assert exc_info.value.reason == "Empty line"
    
    def test_parse_invalid_json(self):
        with pytest.raises(IngestionError) as exc_info:
            self.parser.parse_line("not valid json", 2)
        
        assert exc_info.value.line_number == 2
        assert "Failed to parse JSON" in exc_info.value.reason
    
    def test_parse_non_object(self):
        with pytest.raises(IngestionError) as exc_info:
            self.parser.parse_line('"just a string"')
        
        assert "Expected a JSON object" in exc_info.value.reason
    
    def test_parse_empty_object(self):
        with pytest.raises(IngestionError) as exc_info:
            self.parser.parse_line("{}")
        
        assert exc_info.value.reason == "Empty JSON object"
    
    def test_parse_rejects_nan(self):
        with pytest.raises(IngestionError):
            self.parser.parse_line('{"value": NaN}')
    
    def test_parse_rejects_out_of_range_number(self):
        with pytest.raises(IngestionError):
            self.parser.parse_line('{"value": 1e400}')
    
    def test_parse_rejects_unrepresentable_integer(self):
        line = '{"a": 1' + "0" * 400 + "}"
        
        with pytest.raises(IngestionError) as exc_info:
            self.parser.parse_line(line, 4)
        
        assert exc_info.value.line_number == 4
        assert "out of range" in exc_info.value.reason
        assert self.parser.can_parse(line) is False
    
    def test_parse_keeps_integer_beyond_int64(self):
        record = self.parser.parse_line('{"a": 18446744073709551616}')
        
        assert record.get("a") == 2 ** 64
    
    def test_parse_content_partial_success(self):
        content = "\n".join([
            PINO_LINE,
            "garbage",
            "",
            '{"level":50,"msg":"boom"}',
        ])
        
        result = self.parser.parse_content(content)
        
        assert len(result.records) == 2
        assert [e.line_number for e in result.errors] == [2, 3]
        assert result.summary() == {"parsed": 2, "failed": 2, "total_lines": 4}


class TestLogFileReader:
    """Tests for LogFileReader."""
    
    def test_read_logs(self, tmp_path):
        path = tmp_path / "app.log"
        path.write_text(PINO_LINE + "\nnot json\n" + '{"msg":"second"}\n', encoding="utf-8")
        
        reader = LogFileReader(path)
        result = reader.read_logs()
        
        assert len(result.records) == 2
        assert len(result.errors) == 1
        assert result.errors[0].line_number == 2
        assert reader.line_number == 3
    
    def test_read_invalid_utf8(self, tmp_path):
        path = tmp_path / "binary.log"
        path.write_bytes(b'{"msg":"ok"}\n\xff\xfe\n')
        
        result = LogFileReader(path).read_logs()
        
        assert len(result.records) == 1
        assert result.errors[0].line_number == 2
        assert "utf-8" in result.errors[0].reason
    
    def test_missing_file(self, tmp_path):
        with pytest.raises(IngestionError) as exc_info:
            LogFileReader(tmp_path / "missing.log").read_logs()
        
        assert exc_info.value.line_number == 0
