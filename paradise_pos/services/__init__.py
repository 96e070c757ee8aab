# Register services
