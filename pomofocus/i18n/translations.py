# -*- coding: utf-8 -*-
"""
Translation dictionaries for German and English.

This module contains all translatable strings for the PomoFocus application.
"""

TRANSLATIONS = {
    "en": {
        # Application
        "app.name": "PomoFocus",
        "app.ready": "PomoFocus Ready",

        # Notifications
        "notify.work_complete.title": "Time for a break! 🎉",
        "notify.work_complete.body": "Great work! Take a well-deserved break.",
        "notify.break_complete.title": "Time to focus! 📚",
        "notify.break_complete.body": "Break is over. Let's get back to work!",

        # Timer
        "timer.mode.pomodoro": "Pomodoro",
        "timer.mode.shortBreak": "Short Break",
        "timer.mode.longBreak": "Long Break",
        "timer.session": "Session {current} of {total}",

        # Active task
        "task.no_project": "No project selected",
        "task.select_subtask": "Select a subtask to begin",
        "task.label": "{name} ({completed}/{total} sessions)",

        # Tray menu
        "tray.start": "Start",
        "tray.pause": "Pause",
        "tray.reset": "Reset",
        "tray.mode": "Mode",
        "tray.preferences": "Preferences",
        "tray.pref.auto_start_breaks": "Start Breaks Automatically",
        "tray.pref.auto_start_work": "Start Work Automatically",
        "tray.pref.show_notifications": "Show Notifications",
        "tray.export": "Export Data...",
        "tray.import": "Import Data...",
        "tray.quit": "Quit",
        "tray.app_session": "App session: {elapsed}",

        # Import / export
        "import.title": "Import Data",
        "import.replace_question": "Do you want to REPLACE all current data? Choose No to MERGE instead.",
        "import.success": "Data imported successfully!",
        "import.error": "Error importing data: {error}",
        "export.success": "Data exported to {path}",
        "export.error": "Error exporting data: {error}",

        # Errors
        "error.save_failed": "Could not save your data: {error}",
    },

    "de": {
        # Application
        "app.name": "PomoFocus",
        "app.ready": "PomoFocus bereit",

        # Notifications
        "notify.work_complete.title": "Zeit für eine Pause! 🎉",
        "notify.work_complete.body": "Gute Arbeit! Gönn dir eine verdiente Pause.",
        "notify.break_complete.title": "Zeit, dich zu konzentrieren! 📚",
        "notify.break_complete.body": "Die Pause ist vorbei. Zurück an die Arbeit!",

        # Timer
        "timer.mode.pomodoro": "Pomodoro",
        "timer.mode.shortBreak": "Kurze Pause",
        "timer.mode.longBreak": "Lange Pause",
        "timer.session": "Einheit {current} von {total}",

        # Active task
        "task.no_project": "Kein Projekt ausgewählt",
        "task.select_subtask": "Wähle eine Teilaufgabe, um zu beginnen",
        "task.label": "{name} ({completed}/{total} Einheiten)",

        # Tray menu
        "tray.start": "Start",
        "tray.pause": "Pause",
        "tray.reset": "Zurücksetzen",
        "tray.mode": "Modus",
        "tray.preferences": "Einstellungen",
        "tray.pref.auto_start_breaks": "Pausen automatisch starten",
        "tray.pref.auto_start_work": "Arbeit automatisch starten",
        "tray.pref.show_notifications": "Benachrichtigungen anzeigen",
        "tray.export": "Daten exportieren...",
        "tray.import": "Daten importieren...",
        "tray.quit": "Beenden",
        "tray.app_session": "App-Sitzung: {elapsed}",

        # Import / export
        "import.title": "Daten importieren",
        "import.replace_question": "Sollen ALLE aktuellen Daten ERSETZT werden? Wähle Nein, um stattdessen zusammenzuführen.",
        "import.success": "Daten erfolgreich importiert!",
        "import.error": "Fehler beim Importieren: {error}",
        "export.success": "Daten exportiert nach {path}",
        "export.error": "Fehler beim Exportieren: {error}",

        # Errors
        "error.save_failed": "Deine Daten konnten nicht gespeichert werden: {error}",
    }
}
