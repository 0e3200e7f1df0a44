"""
hostlore loads repositories of host inventory documents
and opens sessions on the hosts they describe.
"""
