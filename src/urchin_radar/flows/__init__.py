"""
Prefect flows for the occurrence pipeline.

Flows:
- survey: Fetch GBIF occurrences for every catalog species and grid them

Usage (local):
    python -m urchin_radar.flows.survey

Usage (Prefect):
    prefect server start  # Optional, for dashboard
    prefect deployment run 'urchin-survey/default'
"""
