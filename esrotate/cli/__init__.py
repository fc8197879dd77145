"""esrotate command line interface"""
