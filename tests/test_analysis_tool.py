"""Tests for the analyze-data and generate-thinking tools."""

import pytest

from gemini_mcp_tools.exceptions import ParseError, ProviderUnavailableError
from gemini_mcp_tools.tools.analysis import (
    DEPTH_INSTRUCTIONS,
    AnalyzeDataTool,
    build_analysis_prompt,
    write_charts,
)
from gemini_mcp_tools.tools.charts import chart_page, column_slug
from gemini_mcp_tools.tools.stats import histogram, summarize
from gemini_mcp_tools.tools.thinking import GenerateThinkingTool
from gemini_mcp_tools.tools.validation import AnalyzeDataArgs, GenerateThinkingArgs


def _analysis_args(encode, content, tmp_path, file_name="data.csv", analysis_type="basic"):
    return AnalyzeDataArgs.model_validate({
        "fileData": encode(content),
        "fileName": file_name,
        "analysisType": analysis_type,
        "outputDir": str(tmp_path / "analysis"),
    })


class TestAnalyzeDataTool:
    """Tests for AnalyzeDataTool.execute."""

    def test_writes_all_artifacts(self, mock_client, encode, sample_csv, tmp_path):
        tool = AnalyzeDataTool(mock_client)

        result = tool.execute(_analysis_args(encode, sample_csv, tmp_path))

        save_dir = tmp_path / "analysis"
        assert (save_dir / "data.csv").read_text(encoding="utf-8") == sample_csv
        reports = list(save_dir.glob("report_*.html"))
        analyses = list(save_dir.glob("analysis_*.txt"))
        charts = list((save_dir / "plots").glob("*_histogram_*.html"))
        assert len(reports) == 1
        assert len(analyses) == 1
        assert [chart.name.split("_histogram_")[0] for chart in charts] == ["a"]
        assert analyses[0].read_text(encoding="utf-8") == mock_client.generate_content.return_value

        report = reports[0].read_text(encoding="utf-8")
        assert "<h1>Insights</h1>" in report
        assert f"plots/{charts[0].name}" in report

        assert "Data Analysis Complete" in result
        assert "<strong>Rows Processed:</strong> 3" in result
        assert "<strong>Numeric Columns:</strong> 1" in result

    def test_prompt_carries_statistics(self, mock_client, encode, sample_csv, tmp_path):
        tool = AnalyzeDataTool(mock_client)

        tool.execute(_analysis_args(encode, sample_csv, tmp_path, analysis_type="detailed"))

        prompt = mock_client.generate_content.call_args.args[0]
        assert "3 rows and 2 columns" in prompt
        assert '"rowCount": 3' in prompt
        assert DEPTH_INSTRUCTIONS["detailed"] in prompt

    def test_same_file_gives_same_statistics(self, mock_client, encode, sample_csv, tmp_path):
        tool = AnalyzeDataTool(mock_client)
        args = _analysis_args(encode, sample_csv, tmp_path)

        tool.execute(args)
        tool.execute(args)

        first, second = [call.args[0] for call in mock_client.generate_content.call_args_list]
        assert first == second

    def test_model_failure_leaves_no_artifacts(self, mock_client, encode, sample_csv, tmp_path):
        mock_client.generate_content.side_effect = ProviderUnavailableError("down")
        tool = AnalyzeDataTool(mock_client)

        with pytest.raises(ProviderUnavailableError):
            tool.execute(_analysis_args(encode, sample_csv, tmp_path))

        assert not (tmp_path / "analysis").exists()

    def test_header_only_file_raises(self, mock_client, encode, tmp_path):
        tool = AnalyzeDataTool(mock_client)

        with pytest.raises(ParseError) as exc_info:
            tool.execute(_analysis_args(encode, "a,b\n", tmp_path))

        assert exc_info.value.file_name == "data.csv"
        mock_client.generate_content.assert_not_called()

    def test_text_only_table_has_no_charts(self, mock_client, encode, tmp_path):
        tool = AnalyzeDataTool(mock_client)

        tool.execute(_analysis_args(encode, "name\nann\nbob\n", tmp_path))

        assert list((tmp_path / "analysis" / "plots").iterdir()) == []

    def test_infinite_cell_is_left_out(self, mock_client, encode, tmp_path):
        tool = AnalyzeDataTool(mock_client)

        result = tool.execute(_analysis_args(encode, "a\n1\n2\n3\ninf\n", tmp_path))

        prompt = mock_client.generate_content.call_args.args[0]
        assert '"max": 3' in prompt
        assert "<strong>Rows Processed:</strong> 4" in result
        assert len(list((tmp_path / "analysis" / "plots").glob("a_histogram_*.html"))) == 1


class TestCharts:
    """Tests for chart helpers."""

    def test_column_slug(self):
        assert column_slug("Revenue ($)") == "Revenue"
        assert column_slug("a/b c") == "a_b_c"
        assert column_slug("$$$") == "column"

    def test_chart_page_embeds_svg(self):
        page = chart_page("price", histogram([1.0, 2.0, 3.0, 4.0]))
        assert page.startswith("<!DOCTYPE html>")
        assert "<svg" in page
        assert "Distribution of price" in page

    def test_write_charts_dedupes_slugs(self, tmp_path):
        rows = [{"a b": 1, "a/b": 2}, {"a b": 3, "a/b": 4}]
        stats = summarize(rows)

        paths = write_charts(rows, stats, tmp_path, 123)

        assert [p.name for p in paths] == ["a_b_histogram_123.html", "a_b_2_histogram_123.html"]


def test_build_analysis_prompt_basic():
    stats = summarize([{"a": 1}, {"a": 2}])
    prompt = build_analysis_prompt(stats, "basic")
    assert prompt.startswith("Analyze this dataset with 2 rows and 1 columns.")
    assert prompt.endswith(DEPTH_INSTRUCTIONS["basic"])


class TestGenerateThinkingTool:
    """Tests for GenerateThinkingTool.execute."""

    def test_saves_and_renders_answer(self, mock_client, tmp_path):
        tool = GenerateThinkingTool(mock_client)
        args = GenerateThinkingArgs.model_validate(
            {"prompt": "Explain <tags>", "outputDir": str(tmp_path / "out")}
        )

        result = tool.execute(args)

        saved = list((tmp_path / "out").glob("gemini_thinking_*.txt"))
        assert len(saved) == 1
        assert saved[0].read_text(encoding="utf-8") == mock_client.generate_content.return_value
        assert "<h1>Insights</h1>" in result
        assert "<li>first point</li>" in result
        assert "Explain &lt;tags&gt;" in result
        mock_client.generate_content.assert_called_once_with("Explain <tags>")
