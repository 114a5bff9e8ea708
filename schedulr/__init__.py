"""
Schedulr – weekly timetable editor (CLI + interactive).
"""
