"""Profiles domain - read-only access to the profile collaborator"""
