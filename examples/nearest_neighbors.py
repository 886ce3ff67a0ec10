from kdsearch import KDTree, euclidean_distance


points = [(0, 0), (1, 1), (2, 2), (3, 3), (4, 4)]
tree = KDTree(2, points)
assert tree.nearest_neighbors((2.1, 2.1), 1) == [(2, 2)]
assert set(tree.nearest_neighbors((2, 2), 3)) == {(1, 1), (2, 2), (3, 3)}

euclidean_tree = KDTree(2, points, euclidean_distance)
assert set(euclidean_tree.radial_search((0, 0), 2.0)) == {(0, 0), (1, 1)}

nav = tree.navigator
assert nav.value == tree.storage[0]
for node in nav.walk():
    print(node.index, node.value)
