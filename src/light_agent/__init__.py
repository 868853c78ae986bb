"""
Pose Lights agent package.

This package contains the local service that:
- reads webcam (or video file) frames
- runs pose estimation on each frame
- switches two lights over MQTT when a wrist enters a top corner
- optionally serves a small HTTP status API
"""
