"""Bot dispatch core: rule language, dispatch controller and platform collaborators"""
