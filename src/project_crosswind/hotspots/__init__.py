from .analyzer import HotspotCell, cell_index, compute_hotspots, iter_bucket_times, project_km

__all__ = ["HotspotCell", "cell_index", "compute_hotspots", "iter_bucket_times", "project_km"]
