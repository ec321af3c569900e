"""
Scheduling Domain

Turns two matched parties' independently submitted free time windows into a
confirmed appointment.

- timeslots.py    TimeSlot value type
- intersection.py first common window meeting the minimum overlap
- conflicts.py    collisions with already confirmed appointments
- service.py      submit -> match -> confirm workflow
- router.py       /dating/schedule endpoints
"""
