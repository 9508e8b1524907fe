"""
Services layer - scan orchestration, screenshot storage, and fold detectors
"""
