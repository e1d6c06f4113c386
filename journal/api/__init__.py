"""
JSON API for accounts, articles and the follower graph.

Endpoints are plain Django function views returning JsonResponse; see
urls.py for the routing table.
"""
