"""
Ingestion layer — provider clients and the concurrent conditions loader.

Submodules:
  soilgrids_client   — ISRIC SoilGrids topsoil pH / organic carbon
  open_meteo_client  — Open-Meteo current weather + daily forecast
  market_client      — Mandi price quotes (demo fixture only)
  loader             — Concurrent fetch of all three with per-source fallback

None of the providers needs credentials.  Set ``use_fixtures = true`` under
[sources] in config (or KISAN_ADVISOR_OFFLINE=1) to skip the network.
"""
