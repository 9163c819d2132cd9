"""
Fumagen - Fumadocs site generator for HITSZ-OpenAuto

Turns training-plan data and course repositories (README + worktree
manifest) into a Fumadocs MDX content tree, then rewrites the pages into
MDX that the site build accepts.
"""

__version__ = "1.0.0"
__author__ = "The Fumagen Authors"
__license__ = "MIT"
