"""
Recommendation engine: converts soil, weather, and market readings into
ranked crop recommendations with human-readable rationales.

Modules
-------
profiles : CropProfile dataclass + CROP_PROFILES (the five built-in crops).
scorer   : ScoreComponents dataclass + resolve_inputs() + score_range()
           + compute_score() + build_rationale() — pure functions, no I/O.
ranker   : ScoredCrop dataclass + build_scored_crops() + rank_crops()
           + build_recommendations().
reporter : write_recommendation_json() + write_recommendation_csv() — file output.
"""
