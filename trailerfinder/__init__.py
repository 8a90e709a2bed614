"""Trailer Finder: movie discovery backed by TMDB"""
