"""
HTML rendering for BDD test reports.

The report is a single self-contained page: header, statistics dashboard with
a Chart.js doughnut, one expandable panel per scenario with its step
screenshots, a flat screenshot gallery and a full-size image viewer.
All interpolated text goes through jinja2 autoescaping; data consumed by the
page script is embedded with the `tojson` filter.
"""

from datetime import datetime
from typing import Any, Dict, List, Mapping, Optional, Sequence, Union

from jinja2 import Environment

from bddreport.core.types import (
    AggregateStatistics,
    ScenarioRecord,
    ScenarioStatus,
    ScreenshotAsset,
    StepEntry,
)
from bddreport.reporting.screenshots import screenshot_link

STATUS_ICONS = {
    ScenarioStatus.PASSED: "✅",
    ScenarioStatus.FAILED: "❌",
    ScenarioStatus.SKIPPED: "⏸️",
}

DEFAULT_CHART_SCRIPT_URL = "https://cdn.jsdelivr.net/npm/chart.js"

HTML_TEMPLATE = """<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <title>{{ brand_title }} - {{ generated_at }}</title>
    <meta http-equiv="Cache-Control" content="no-cache, no-store, must-revalidate">
    <meta http-equiv="Pragma" content="no-cache">
    <meta http-equiv="Expires" content="0">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <script src="{{ chart_script_url }}"></script>
    <style>
        body { font-family: 'Segoe UI', Tahoma, Geneva, Verdana, sans-serif; margin: 0; padding: 20px; background-color: #f8f9fa; }
        .container { max-width: 1200px; margin: 0 auto; }
        .header { background: linear-gradient(135deg, #2196F3, #1976D2); color: white; padding: 30px; border-radius: 12px; margin-bottom: 30px; text-align: center; }
        .header h1 { margin: 0; font-size: 2.5em; font-weight: 300; }
        .header p { margin: 10px 0; opacity: 0.9; }
        .timestamp { font-size: 0.9em; opacity: 0.8; margin-top: 15px; }

        /* Statistics Dashboard */
        .stats-dashboard { display: grid; grid-template-columns: 2fr 1fr; gap: 20px; margin-bottom: 30px; }
        .stats-cards { display: grid; grid-template-columns: repeat(auto-fit, minmax(200px, 1fr)); gap: 15px; }
        .stat-card { background: white; padding: 20px; border-radius: 8px; box-shadow: 0 2px 8px rgba(0,0,0,0.1); text-align: center; }
        .stat-number { font-size: 2em; font-weight: bold; margin-bottom: 5px; }
        .stat-label { color: #666; font-size: 0.9em; }
        .stat-passed { color: #4CAF50; }
        .stat-failed { color: #f44336; }
        .stat-skipped { color: #ff9800; }
        .stat-total { color: #2196F3; }
        .stat-duration { color: #ff9800; }
        .chart-container { background: white; padding: 20px; border-radius: 8px; box-shadow: 0 2px 8px rgba(0,0,0,0.1); }
        .chart-container canvas { max-height: 300px; }

        /* Summary */
        .summary { background: white; padding: 25px; border-radius: 10px; margin: 20px 0; box-shadow: 0 4px 12px rgba(0,0,0,0.1); }
        .summary-bar { display: flex; justify-content: space-between; align-items: center; margin-bottom: 20px; }
        .summary-bar button { margin-left: 10px; padding: 8px 15px; border: 1px solid #2196F3; background: white; color: #2196F3; border-radius: 4px; cursor: pointer; }

        /* Scenarios */
        .scenario { background: white; margin: 20px 0; border-radius: 10px; box-shadow: 0 4px 12px rgba(0,0,0,0.1); overflow: hidden; }
        .scenario-header { padding: 20px; cursor: pointer; display: flex; justify-content: space-between; align-items: center; }
        .scenario-header:hover { background-color: #f8f9fa; }
        .scenario-meta { display: flex; gap: 20px; align-items: center; }
        .scenario-meta span { padding: 5px 10px; border-radius: 15px; font-size: 0.85em; }
        .status { background: #e9ecef; color: #495057; }
        .duration { background: #fff3cd; color: #856404; }
        .expand-icon { font-size: 1.2em; transition: transform 0.3s; }
        .expand-icon.expanded { transform: rotate(180deg); }
        .scenario.passed { border-left: 5px solid #4CAF50; }
        .scenario.failed { border-left: 5px solid #f44336; }
        .scenario.skipped { border-left: 5px solid #ff9800; }
        .error-message { background: #ffebee; padding: 15px; border-radius: 4px; border-left: 4px solid #f44336; font-family: monospace; white-space: pre-wrap; margin: 10px 0; }

        /* Steps */
        .scenario-steps { padding: 0 20px 20px; background: #f8f9fa; }
        .scenario-steps[hidden] { display: none; }
        .step { background: white; margin: 10px 0; padding: 15px; border-radius: 6px; border-left: 3px solid #ddd; }
        .step-header { display: flex; justify-content: space-between; align-items: center; margin-bottom: 10px; }
        .step-name { font-weight: 500; color: #333; }
        .step-status { padding: 3px 8px; border-radius: 10px; font-size: 0.75em; font-weight: bold; }
        .step-status.passed { background: #d4edda; color: #155724; }
        .step-screenshot img { max-width: 150px; border: 1px solid #ddd; border-radius: 4px; cursor: pointer; }

        /* Screenshot Gallery */
        .screenshot-gallery { margin: 20px 0; padding: 20px; background: white; border-radius: 10px; box-shadow: 0 4px 12px rgba(0,0,0,0.1); }
        .screenshot { margin: 15px; display: inline-block; text-align: center; }
        .screenshot img { max-width: 180px; border: 2px solid #ddd; border-radius: 6px; cursor: pointer; }
        .screenshot img:hover { border-color: #2196F3; }
        .screenshot-title { font-size: 0.8em; margin-top: 8px; color: #666; font-weight: 500; }

        /* Modal */
        .modal { display: none; position: fixed; z-index: 1000; left: 0; top: 0; width: 100%; height: 100%; background: rgba(0,0,0,0.9); }
        .modal-content { margin: 2% auto; display: block; max-width: 95%; max-height: 95%; border-radius: 8px; }
        .close { position: absolute; top: 20px; right: 35px; color: #f1f1f1; font-size: 40px; font-weight: bold; cursor: pointer; }

        h1, h2, h3 { margin-top: 0; }
        h2 { color: #2196F3; }
        .footer { text-align: center; margin-top: 40px; color: #666; font-size: 0.9em; }

        @media (max-width: 768px) {
            .stats-dashboard { grid-template-columns: 1fr; }
            .scenario-meta { flex-direction: column; gap: 10px; }
            .container { padding: 10px; }
        }
    </style>
</head>
<body>
    <div class="container">
        <div class="header">
            <h1>🥒 {{ brand_title }}</h1>
            <p>
            {%- for key, value in metadata %}{{ key }}: {{ value }}{% if not loop.last %} | {% endif %}{% endfor -%}
            </p>
            <p>Generated: {{ generated_at }}</p>
            <div class="timestamp">Cache ID: {{ cache_id }}</div>
        </div>

        <!-- Statistics Dashboard -->
        <div class="stats-dashboard">
            <div class="stats-cards">
                <div class="stat-card">
                    <div class="stat-number stat-total">{{ stats.total }}</div>
                    <div class="stat-label">Total Tests</div>
                </div>
                <div class="stat-card">
                    <div class="stat-number stat-passed">{{ stats.passed }}</div>
                    <div class="stat-label">Passed</div>
                </div>
                <div class="stat-card">
                    <div class="stat-number stat-failed">{{ stats.failed }}</div>
                    <div class="stat-label">Failed</div>
                </div>
                <div class="stat-card">
                    <div class="stat-number stat-skipped">{{ stats.skipped }}</div>
                    <div class="stat-label">Skipped</div>
                </div>
                <div class="stat-card">
                    <div class="stat-number stat-duration">{{ total_duration }}s</div>
                    <div class="stat-label">Total Duration</div>
                </div>
            </div>
            <div class="chart-container">
                <canvas id="resultsChart"></canvas>
            </div>
        </div>

        <!-- Test Scenarios -->
        <div class="summary">
            <div class="summary-bar">
                <h2>📋 Test Scenarios</h2>
                <div>
                    <button type="button" id="expand-all">Expand All</button>
                    <button type="button" id="collapse-all">Collapse All</button>
                </div>
            </div>
            <p><strong>Success Rate:</strong> {{ success_rate }}% | <strong>Average Duration:</strong> {{ average_duration }}s per test</p>
        </div>

        {% for scenario in scenarios %}
        <div class="scenario {{ scenario.status }}">
            <div class="scenario-header" data-index="{{ loop.index0 }}">
                <h3>{{ scenario.icon }} {{ scenario.title }}</h3>
                <div class="scenario-meta">
                    <span class="status">Status: {{ scenario.status|upper }}</span>
                    <span class="duration">Duration: {{ scenario.duration }}s</span>
                    <span class="expand-icon" id="expand-{{ loop.index0 }}">▼</span>
                </div>
            </div>
            <div class="scenario-steps" id="steps-{{ loop.index0 }}" hidden>
                {% if scenario.error_message %}
                <div class="error-message">{{ scenario.error_message }}</div>
                {% endif %}
                <h4>📋 Test Steps ({{ scenario.steps|length }} steps)</h4>
                {% for step in scenario.steps %}
                <div class="step">
                    <div class="step-header">
                        <span class="step-name">📍 {{ step.name }}</span>
                        <span class="step-status {{ step.status }}">{{ step.status|upper }}</span>
                    </div>
                    <div class="step-screenshot">
                        <img src="{{ step.screenshot }}" alt="{{ step.name }}" class="zoomable">
                    </div>
                </div>
                {% endfor %}
            </div>
        </div>
        {% endfor %}

        <div class="screenshot-gallery">
            <h2>📸 Test Screenshots</h2>
            {% if gallery %}
            <p>Click on any screenshot to view full size:</p>
            {% for shot in gallery %}
            <div class="screenshot">
                <img src="{{ shot.src }}" alt="{{ shot.label }}" class="zoomable">
                <div class="screenshot-title">{{ shot.label }}</div>
            </div>
            {% endfor %}
            {% else %}
            <p>No screenshots available for this test run.</p>
            {% endif %}
        </div>

        <div id="modal" class="modal">
            <span class="close">&times;</span>
            <img class="modal-content" id="modal-img" alt="">
        </div>

        <div class="footer">
            Report generated at {{ generated_at }} | Cache ID: {{ cache_id }} | 📸 {{ attached_count }} screenshots captured
        </div>
    </div>
    <script>
        var chartData = {{ chart_data|tojson }};

        function openModal(src) {
            document.getElementById('modal').style.display = 'block';
            document.getElementById('modal-img').src = src;
        }
        function closeModal() {
            document.getElementById('modal').style.display = 'none';
        }
        function setExpanded(index, expanded) {
            document.getElementById('steps-' + index).hidden = !expanded;
            document.getElementById('expand-' + index).classList.toggle('expanded', expanded);
        }
        document.querySelectorAll('.scenario-header').forEach(function (header) {
            header.addEventListener('click', function () {
                var index = header.dataset.index;
                setExpanded(index, document.getElementById('steps-' + index).hidden);
            });
        });
        document.getElementById('expand-all').addEventListener('click', function () {
            document.querySelectorAll('.scenario-header').forEach(function (h) { setExpanded(h.dataset.index, true); });
        });
        document.getElementById('collapse-all').addEventListener('click', function () {
            document.querySelectorAll('.scenario-header').forEach(function (h) { setExpanded(h.dataset.index, false); });
        });
        document.querySelectorAll('img.zoomable').forEach(function (img) {
            img.addEventListener('click', function () { openModal(img.getAttribute('src')); });
        });
        document.getElementById('modal').addEventListener('click', closeModal);
        document.addEventListener('keydown', function (e) {
            if (e.key === 'Escape') closeModal();
        });

        window.addEventListener('load', function () {
            if (typeof Chart === 'undefined') return;
            new Chart(document.getElementById('resultsChart').getContext('2d'), {
                type: 'doughnut',
                data: {
                    labels: chartData.labels,
                    datasets: [{ data: chartData.values, backgroundColor: chartData.colors, borderWidth: 0 }]
                },
                options: {
                    responsive: true,
                    plugins: {
                        title: { display: true, text: 'Test Results Distribution' },
                        legend: { position: 'bottom' }
                    }
                }
            });
        });
    </script>
</body>
</html>
"""

_environment = Environment(autoescape=True)
_template = _environment.from_string(HTML_TEMPLATE)


def _seconds(millis: float, digits: int) -> str:
    return f"{millis / 1000:.{digits}f}"


def prepare_template_data(
    records: Sequence[ScenarioRecord],
    stats: AggregateStatistics,
    step_map: Mapping[str, List[StepEntry]],
    assets: Sequence[ScreenshotAsset],
    generated_at: Union[datetime, str],
    cache_id: Union[int, str],
    link_prefix: str = "../screenshots",
    brand_title: str = "Sharedo BDD Test Report",
    metadata: Optional[Mapping[str, str]] = None,
    chart_script_url: str = DEFAULT_CHART_SCRIPT_URL,
) -> Dict[str, Any]:
    """Prepare data for template rendering."""
    if isinstance(generated_at, datetime):
        generated_at = generated_at.strftime("%Y-%m-%d %H:%M:%S")

    scenarios = []
    for record in records:
        steps = step_map.get(record.title, [])
        scenarios.append(
            {
                "title": record.title,
                "status": record.status.value,
                "icon": STATUS_ICONS[record.status],
                "duration": _seconds(record.duration_millis, 2),
                "error_message": record.error_message,
                "steps": [
                    {"name": step.name, "screenshot": step.screenshot, "status": step.status.value}
                    for step in steps
                ],
            }
        )

    gallery = [
        {"src": screenshot_link(asset.filename, link_prefix), "label": asset.step_label}
        for asset in assets
    ]

    return {
        "brand_title": brand_title,
        "metadata": list((metadata or {}).items()),
        "generated_at": generated_at,
        "cache_id": cache_id,
        "chart_script_url": chart_script_url,
        "stats": stats,
        "total_duration": _seconds(stats.total_duration_millis, 1),
        "average_duration": _seconds(stats.average_duration_millis, 2),
        "success_rate": f"{stats.success_rate:.1f}",
        "scenarios": scenarios,
        "gallery": gallery,
        "attached_count": sum(len(entries) for entries in step_map.values()),
        "chart_data": {
            "labels": ["Passed", "Failed", "Skipped"],
            "values": [stats.passed, stats.failed, stats.skipped],
            "colors": ["#4CAF50", "#f44336", "#ff9800"],
        },
    }


def render(
    records: Sequence[ScenarioRecord],
    stats: AggregateStatistics,
    step_map: Mapping[str, List[StepEntry]],
    assets: Sequence[ScreenshotAsset],
    generated_at: Union[datetime, str],
    cache_id: Union[int, str],
    **options: Any,
) -> str:
    """
    Render the report document.

    Args:
        records: Flattened scenario records, in display order
        stats: Aggregate statistics for the records
        step_map: Step screenshots per scenario title
        assets: Every discovered screenshot, in gallery order
        generated_at: Generation time shown in the header and footer
        cache_id: Cache-busting identifier
        **options: Presentation values accepted by prepare_template_data
            (link_prefix, brand_title, metadata, chart_script_url)

    Returns:
        The HTML document
    """
    template_data = prepare_template_data(
        records, stats, step_map, assets, generated_at, cache_id, **options
    )
    return _template.render(**template_data)
