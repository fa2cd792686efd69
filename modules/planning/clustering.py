"""
modules/planning/clustering.py
--------------------------------
Proximity Clusterer: groups selected places into spatial clusters so that a
day's stops stay geographically coherent.

Algorithm (greedy, single pass, not k-means):
  for each place, in input order:
      compare to the centroid of every existing cluster, in creation order
      first centroid within radius  → join that cluster
      none within radius            → start a new singleton cluster

Centroids are never updated incrementally; Cluster.centroid is recomputed
from the full member list whenever it is read.

The result is deterministic for a given input order but NOT invariant under
reordering of the input.
"""

from __future__ import annotations
import logging

import config
from schemas.itinerary import Cluster
from schemas.place import Place
from modules.tool_usage.distance_tool import distance_km

log = logging.getLogger(__name__)


class ProximityClusterer:
    """Radius-threshold clustering of places."""

    def __init__(self, cluster_radius_km: float = config.CLUSTER_RADIUS_KM):
        self.cluster_radius_km = cluster_radius_km

    def cluster(self, places: list[Place], cluster_radius_km: float | None = None) -> list[Cluster]:
        """
        Args:
            places:            Places in caller order.
            cluster_radius_km: Overrides the instance radius for this call.

        Returns:
            Clusters in creation order. Empty input → [].
        """
        radius = self.cluster_radius_km if cluster_radius_km is None else cluster_radius_km
        clusters: list[Cluster] = []

        for place in places:
            for existing in clusters:
                if distance_km(place.location, existing.centroid) <= radius:
                    existing.places.append(place)
                    break
            else:
                clusters.append(Cluster(places=[place]))

        log.debug("Clustered %d places into %d clusters (radius %.2f km)",
                  len(places), len(clusters), radius)
        return clusters


def cluster_places(places: list[Place], cluster_radius_km: float = config.CLUSTER_RADIUS_KM) -> list[Cluster]:
    return ProximityClusterer(cluster_radius_km).cluster(places)
