"""Scanned schedule sheet to Gantt chart.

Runs Tesseract OCR on a photographed or scanned schedule, rebuilds the
table, derives Gantt tasks, and renders and exports the chart as a PDF.
"""
