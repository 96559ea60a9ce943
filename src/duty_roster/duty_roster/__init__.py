"""Duty Roster package.

Monthly shift-scheduling engine organized by feature modules (roster,
rotation, schedules, substitutions, reports) with a thin Flask controller
layer over service/repository layers.
"""
