"""Routing — manifest pattern matching, request augmentation, verb dispatch.

Routes are compiled ahead of time into the manifest; this package only
tests paths against them and binds the captured parameters.
"""
