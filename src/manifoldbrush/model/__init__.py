"""
The MODEL layer contains pure data structures and numerics.
It has NO knowledge of brushes, the coordinator or any host UI.
It deals with the mesh, its graph, spectral kernels and excitation signals.
"""
