"""Kanban board API with a chat assistant that executes board actions"""
