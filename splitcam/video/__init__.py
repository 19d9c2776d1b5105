"""Video side of the split pipeline: detection, planning, progress and execution"""
