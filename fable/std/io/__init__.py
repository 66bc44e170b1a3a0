from .basic_io import BasicIO, BufferedIO, CLEAR_SCREEN, read_script

__all__ = ['BasicIO', 'BufferedIO', 'CLEAR_SCREEN', 'read_script']
