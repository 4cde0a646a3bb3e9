"""
Wiki-backed providers: articles, sections, tips, images and search.
"""
