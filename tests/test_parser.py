from calltrends.core.parser import ChartSpec, parse_chart_request, sanitize_config


def test_parse():
    assert parse_chart_request("pie chart of topics") == ChartSpec("pie", "topics", "Topics")
    assert parse_chart_request("Line chart of call volume over time") == ChartSpec(
        "line", "volume-over-time", "Call volume over time")
    assert parse_chart_request("Show me intents as a bar chart") == ChartSpec("bar", "intents", "Intents")


def test_parse_keywords():
    assert parse_chart_request("breakdown of sentiment") == ChartSpec("pie", "sentiment", "Member sentiment")
    assert parse_chart_request("trend of calls over time").type == "line"
    assert parse_chart_request("area chart of number of calls") == ChartSpec("area", "calls", "Call volume")


def test_parse_rule_order():
    # topic wins over sentiment for both metric and title
    assert parse_chart_request("line chart of topic sentiment") == ChartSpec("line", "topics", "Topics")
    # "calls" next to "intent" still means intents
    assert parse_chart_request("pie chart of calls by intent") == ChartSpec("pie", "intents", "Intents")


def test_parse_defaults():
    assert parse_chart_request("something else entirely") == ChartSpec("bar", "intents", "Custom view")
    assert parse_chart_request("") == ChartSpec("bar", "intents", "Custom view")


def test_sanitize_config():
    assert sanitize_config({"type": "scatter", "metric": "topics", "title": "Mine"}) == ChartSpec(
        "bar", "topics", "Mine")
    assert sanitize_config({"type": "line", "metric": "revenue"}) == ChartSpec("line", "intents", "Custom view")
    assert sanitize_config({"title": "x" * 200}).title == "x" * 80
    assert sanitize_config({}) == ChartSpec("bar", "intents", "Custom view")
    assert sanitize_config({"type": "area", "metric": "volume-over-time", "title": 42}).title == "42"
